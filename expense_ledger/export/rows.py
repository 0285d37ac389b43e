"""
Export Serializer

Projects expenses into rows for a single "Expenses" sheet. One row per
expense, same order as the input, no aggregation. Callers pass the
currently filtered expenses, not necessarily the whole ledger.
"""

from typing import Iterable, Optional

from expense_ledger.config import get_settings
from expense_ledger.models.expense import Expense, ExportRow


EXPORT_SHEET_NAME = "Expenses"
EXPORT_COLUMNS = ["Date", "Description", "Category", "Amount"]


def export_rows(
    expenses: Iterable[Expense],
    date_format: Optional[str] = None,
) -> list[ExportRow]:
    """
    Build export rows.

    Args:
        expenses: Expenses to export, in the order they should appear
        date_format: strftime format for the Date column. Defaults to
                     the configured export date format ("%d %b %Y").
    """
    date_format = date_format or get_settings().export.date_format
    return [
        ExportRow(
            date=expense.created_at.strftime(date_format),
            description=expense.description,
            category=expense.category.value,
            amount=expense.amount,
        )
        for expense in expenses
    ]


def export_table(rows: Iterable[ExportRow]) -> list[list]:
    """Header row followed by every row's cells."""
    return [list(EXPORT_COLUMNS)] + [row.to_sheets_row() for row in rows]
