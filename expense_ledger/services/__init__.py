"""Services package: the capabilities the ledger is built on."""

from expense_ledger.services.clock import Clock, FixedClock, SystemClock
from expense_ledger.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Storage
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageUnavailableError",
]
