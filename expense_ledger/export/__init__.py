"""
Export Package

Row projection plus two writers for the tabular export: an .xlsx
workbook and a Google Sheets worksheet.
"""

from expense_ledger.export.rows import (
    EXPORT_COLUMNS,
    EXPORT_SHEET_NAME,
    export_rows,
    export_table,
)
from expense_ledger.export.workbook import build_workbook, write_workbook
from expense_ledger.export.google_sheets import GoogleSheetsClient, GoogleSheetsExporter

__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_SHEET_NAME",
    "GoogleSheetsClient",
    "GoogleSheetsExporter",
    "build_workbook",
    "export_rows",
    "export_table",
    "write_workbook",
]
