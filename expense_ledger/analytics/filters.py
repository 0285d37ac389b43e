"""
Date Filter

Narrows a list of expenses to a named time window relative to a
reference instant. Windows have an inclusive lower bound and no upper
bound, so future-dated expenses always stay visible.

    TODAY  created_at >= start of the reference day
    WEEK   created_at >= start of the reference day - 7 days
    MONTH  created_at >= first day of the reference month
    ALL    everything
"""

from datetime import datetime, time, timedelta
from typing import Iterable, Optional, Union

from expense_ledger.models.expense import Expense, WindowKind, as_local_naive


def window_start(window: Union[WindowKind, str], reference: datetime) -> Optional[datetime]:
    """Inclusive lower bound of ``window``, or None for ALL."""
    window = WindowKind(window)
    if window is WindowKind.ALL:
        return None

    day_start = datetime.combine(as_local_naive(reference).date(), time.min)
    if window is WindowKind.TODAY:
        return day_start
    if window is WindowKind.WEEK:
        return day_start - timedelta(days=7)
    return day_start.replace(day=1)


def filter_expenses(
    expenses: Iterable[Expense],
    window: Union[WindowKind, str],
    reference: datetime,
) -> list[Expense]:
    """Expenses inside ``window``, in their original order."""
    start = window_start(window, reference)
    if start is None:
        return list(expenses)
    return [expense for expense in expenses if expense.created_at >= start]
