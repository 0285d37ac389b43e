"""
Excel Workbook Writer

Renders export rows into an .xlsx file with a single sheet.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font

from expense_ledger.config import get_settings
from expense_ledger.errors import ExportError
from expense_ledger.export.rows import EXPORT_COLUMNS, export_table
from expense_ledger.log import get_logger
from expense_ledger.models.expense import ExportRow


logger = get_logger(__name__)

AMOUNT_FORMAT = "#,##0.00"


def build_workbook(rows: Iterable[ExportRow], sheet_name: Optional[str] = None) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name or get_settings().export.sheet_name

    for values in export_table(rows):
        sheet.append(values)

    for cell in sheet[1]:
        cell.font = Font(bold=True)
    amount_column = EXPORT_COLUMNS.index("Amount") + 1
    for (cell,) in sheet.iter_rows(min_row=2, min_col=amount_column, max_col=amount_column):
        cell.number_format = AMOUNT_FORMAT

    return workbook


def write_workbook(
    rows: Iterable[ExportRow],
    path: Union[str, Path],
    sheet_name: Optional[str] = None,
) -> Path:
    """
    Save rows as an .xlsx file and return its path.

    Raises:
        ExportError: If the file cannot be written
    """
    rows = list(rows)
    path = Path(path)
    workbook = build_workbook(rows, sheet_name)
    try:
        workbook.save(path)
    except OSError as e:
        raise ExportError(f"Failed to write workbook {path}: {e}") from e

    logger.info("workbook_export_completed", path=str(path), row_count=len(rows))
    return path
