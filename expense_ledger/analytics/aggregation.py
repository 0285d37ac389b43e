"""
Aggregation Engine

Totals, per-category sums, budget classification and the monthly trend.

DESIGN DECISION: Every grouping is an explicit fold into a dict, and
anything that must come out in order is sorted explicitly afterwards.
Nothing relies on the iteration order of the grouping itself.

All sums are Decimal, so category totals add up to the overall total
exactly.
"""

from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Iterable, Optional, Union

from expense_ledger.config import LedgerSettings, get_settings
from expense_ledger.models.expense import (
    BudgetStatus,
    BudgetTier,
    Expense,
    ExpenseCategory,
    TrendPoint,
)


Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    """Sum of all amounts; 0 for no expenses."""
    return reduce(lambda acc, expense: acc + expense.amount, expenses, ZERO)


def category_totals(expenses: Iterable[Expense]) -> dict[ExpenseCategory, Decimal]:
    """
    Sum of amounts per category.

    A category appears only if at least one expense has it. Keys follow
    the declaration order of ExpenseCategory.
    """
    def add(acc: dict[ExpenseCategory, Decimal], expense: Expense) -> dict[ExpenseCategory, Decimal]:
        acc[expense.category] = acc.get(expense.category, ZERO) + expense.amount
        return acc

    sums = reduce(add, expenses, {})
    return {category: sums[category] for category in ExpenseCategory if category in sums}


def classify_percentage(
    percentage: Number,
    settings: Optional[LedgerSettings] = None,
) -> BudgetTier:
    """
    Map a spend percentage to a tier.

    Defaults: below 80 is ON_TRACK, 80 up to (not including) 100 is
    APPROACHING, 100 and above is EXCEEDED.
    """
    settings = settings or get_settings().ledger
    value = _to_decimal(percentage)

    if value >= settings.exceeded_threshold:
        return BudgetTier.EXCEEDED
    if value >= settings.approaching_threshold:
        return BudgetTier.APPROACHING
    return BudgetTier.ON_TRACK


def budget_status(
    total: Number,
    budget: Number,
    settings: Optional[LedgerSettings] = None,
) -> BudgetStatus:
    """
    Measure spending against the budget.

    A budget of zero or below cannot be divided by. Nothing spent against
    it reads as 0% ON_TRACK; any spending reads as 100% EXCEEDED.
    """
    total = _to_decimal(total)
    budget = _to_decimal(budget)

    if budget > 0:
        percentage = total / budget * HUNDRED
    elif total == 0:
        percentage = ZERO
    else:
        return BudgetStatus(
            percentage=100.0,
            tier=BudgetTier.EXCEEDED,
            total=total,
            budget=budget,
        )

    return BudgetStatus(
        percentage=float(percentage),
        tier=classify_percentage(percentage, settings),
        total=total,
        budget=budget,
    )


def monthly_trend(expenses: Iterable[Expense], limit: int = 6) -> list[TrendPoint]:
    """
    Monthly totals, oldest first, for the ``limit`` most recent months.

    Pass the full history here, not a filtered window: the trend always
    spans every recorded month. Months without expenses are not listed.
    """
    if limit <= 0:
        return []

    def add(acc: dict[tuple[int, int], Decimal], expense: Expense) -> dict[tuple[int, int], Decimal]:
        key = (expense.created_at.year, expense.created_at.month)
        acc[key] = acc.get(key, ZERO) + expense.amount
        return acc

    groups = reduce(add, expenses, {})
    chronological = sorted(groups.items(), key=lambda item: item[0])

    return [
        TrendPoint(
            year=year,
            month=month,
            month_label=date(year, month, 1).strftime("%b %Y"),
            amount=amount,
        )
        for (year, month), amount in chronological[-limit:]
    ]
