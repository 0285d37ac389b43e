"""
Data Models Package

This package contains all Pydantic models used by the expense ledger.
Everything the ledger stores or derives conforms to these schemas.
"""

from expense_ledger.models.expense import (
    BudgetStatus,
    BudgetTier,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExportRow,
    LedgerSummary,
    TrendPoint,
    ValidationIssue,
    WindowKind,
    as_local_naive,
)

__all__ = [
    "BudgetStatus",
    "BudgetTier",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExportRow",
    "LedgerSummary",
    "TrendPoint",
    "ValidationIssue",
    "WindowKind",
    "as_local_naive",
]
