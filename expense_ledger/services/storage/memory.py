"""In-memory storage, used by tests and throwaway ledgers."""

from typing import Mapping, Optional

from expense_ledger.services.storage.interface import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """Key-value storage backed by a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored so far."""
        return dict(self._values)
