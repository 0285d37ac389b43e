"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a minimal key-value
capability instead of talking to a file or database directly.
This allows us to:
1. Use in-memory storage for testing
2. Keep the on-disk format independent of ledger logic
3. Swap in another durable store without touching the ledger

The interface is intentionally tiny - two keys, string values.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_ledger.errors import LedgerError


class KeyValueStorage(ABC):
    """
    Durable string storage addressed by key.

    Implementations must make a successful ``set`` visible to every
    later ``get`` of the same key, including after a restart.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under ``key``.

        Returns:
            The stored text, or None if the key was never written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the write did not complete
        """
        pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The backend could not be reached or refused the write (e.g. disk full)."""
    pass
