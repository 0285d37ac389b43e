"""
Storage Services Package

Provides the key-value storage abstraction the ledger persists through,
with an in-memory implementation and a JSON file implementation.
"""

from expense_ledger.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageUnavailableError,
)
from expense_ledger.services.storage.json_file import JsonFileStorage
from expense_ledger.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
