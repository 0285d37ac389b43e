"""
Clock Capability

The ledger never reads the wall clock directly. It asks an injected
clock, so tests can pin "now" and move it deterministically.
"""

from datetime import datetime, timedelta
from typing import Protocol

from expense_ledger.models.expense import as_local_naive


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Local wall-clock time, without tzinfo."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, moment: datetime):
        self._moment = as_local_naive(moment)

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = as_local_naive(moment)

    def advance(self, **delta: float) -> datetime:
        """Move forward by a ``timedelta(**delta)`` and return the new time."""
        self._moment += timedelta(**delta)
        return self._moment
