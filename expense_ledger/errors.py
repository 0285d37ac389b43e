"""
Ledger Exceptions

Every failure the ledger surfaces to a caller derives from LedgerError,
so a presentation layer can catch one type and show the message.
"""

from typing import Iterable

from expense_ledger.models.expense import ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidInputError(LedgerError):
    """
    A proposed expense or budget was rejected.

    ``issues`` lists every problem found, not just the first one.
    """

    def __init__(self, issues: Iterable[ValidationIssue]):
        self.issues = list(issues)
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in self.issues)
        super().__init__(summary or "Invalid input")


class NotFoundError(LedgerError):
    """No expense with the requested id exists."""

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__(f"Expense not found: {expense_id}")


class ExportError(LedgerError):
    """Export rows could not be written to their destination."""
    pass
