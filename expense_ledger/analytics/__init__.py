"""Analytics package: date windows and aggregation over expenses."""

from expense_ledger.analytics.aggregation import (
    budget_status,
    category_totals,
    classify_percentage,
    monthly_trend,
    total_amount,
)
from expense_ledger.analytics.filters import filter_expenses, window_start

__all__ = [
    "budget_status",
    "category_totals",
    "classify_percentage",
    "filter_expenses",
    "monthly_trend",
    "total_amount",
    "window_start",
]
