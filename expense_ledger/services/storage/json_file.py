"""
JSON File Storage

All keys live in one JSON document on local disk:

    {"expenses": "[...]", "budget": "10000"}

Values are stored as the strings the ledger hands over, so the file
mirrors the two independently stored values of the ledger exactly.

DESIGN DECISION: Writes go to a temporary file in the same directory
which then replaces the document with ``os.replace``. A crash mid-write
leaves the previous document intact instead of a truncated one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from expense_ledger.log import get_logger
from expense_ledger.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageUnavailableError,
)


logger = get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key-value storage kept in a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        value = self._read_document().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise StorageError(f"Value for '{key}' in {self._path} is not text")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            document = self._read_document()
        except StorageUnavailableError:
            # The document may still be intact; writing now would drop its other keys.
            raise
        except StorageError as e:
            # An unreadable document is replaced rather than blocking every write.
            logger.warning("storage_document_replaced", path=str(self._path), error=str(e))
            document = {}
        document[key] = value

        try:
            self._write_document(document)
        except OSError as e:
            raise StorageUnavailableError(f"Failed to write {self._path}: {e}") from e

    def _read_document(self) -> dict:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read {self._path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"{self._path} does not hold a JSON object")
        return document

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.1),
        reraise=True,
    )
    def _write_document(self, document: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
