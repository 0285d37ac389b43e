"""Shared fixtures for ledger tests."""

from datetime import datetime

import pytest

from expense_ledger.config import LedgerSettings
from expense_ledger.ledger import ExpenseLedger
from expense_ledger.services.clock import FixedClock
from expense_ledger.services.storage import InMemoryStorage, StorageUnavailableError


class RecordingStorage(InMemoryStorage):
    """In-memory storage that counts writes and can be told to fail them."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes: list[str] = []
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageUnavailableError("quota exceeded")
        self.writes.append(key)
        super().set(key, value)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 15, 14, 30))


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings()


@pytest.fixture
def ledger(storage, clock, ledger_settings) -> ExpenseLedger:
    return ExpenseLedger(storage, clock=clock, settings=ledger_settings)


@pytest.fixture
def storage_factory():
    """Build RecordingStorage instances pre-loaded with raw values."""
    return RecordingStorage
