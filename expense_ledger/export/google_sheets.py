"""
Google Sheets Export

DESIGN DECISION: Google Sheets is offered as an export target because:
1. The user can view and share their expenses without extra software
2. No file handling on the user's side
3. Spreadsheet formulas and charts work on the exported data directly

TRADEOFFS:
- Each export replaces the whole "Expenses" worksheet (fine for a
  personal ledger)
- Requires a service account with access to the spreadsheet

The ledger never reads back from the sheet; it is a one-way export.
"""

from typing import Iterable, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_ledger.config import GoogleSheetsSettings, get_settings
from expense_ledger.errors import ExportError
from expense_ledger.export.rows import EXPORT_COLUMNS, export_table
from expense_ledger.log import get_logger
from expense_ledger.models.expense import ExportRow


logger = get_logger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


class GoogleSheetsClient:
    """
    Manages the connection to Google Sheets.

    Connects lazily, so building a client never needs credentials.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._settings = settings
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @property
    def settings(self) -> GoogleSheetsSettings:
        if self._settings is None:
            self._settings = get_settings().google_sheets
        return self._settings

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self.settings.credentials_path,
                    scopes=SCOPES,
                )
            except FileNotFoundError:
                raise ExportError(
                    f"Google credentials file not found: {self.settings.credentials_path}"
                )
            except ValueError as e:
                raise ExportError(f"Invalid Google credentials: {e}")
            self._client = gspread.authorize(credentials)

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self.settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise ExportError(
                    f"Spreadsheet not found: {self.settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, min_rows: int = 1000) -> gspread.Worksheet:
        """Get or create a worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            return spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            return spreadsheet.add_worksheet(
                title=title,
                rows=min_rows,
                cols=len(EXPORT_COLUMNS),
            )


class GoogleSheetsExporter:
    """Writes export rows into the "Expenses" worksheet of a spreadsheet."""

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        sheet_name: Optional[str] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._sheet_name = sheet_name or get_settings().export.sheet_name

    def export(self, rows: Iterable[ExportRow]) -> int:
        """
        Replace the worksheet contents with ``rows``.

        Returns:
            Number of expense rows written (header excluded)

        Raises:
            ExportError: If the sheet could not be written
        """
        values = export_table(rows)
        try:
            sheet = self._client.get_worksheet(self._sheet_name, min_rows=len(values) + 1)
            self._write(sheet, values)
        except gspread.exceptions.GSpreadException as e:
            raise ExportError(f"Failed to export to Google Sheets: {e}") from e

        row_count = len(values) - 1
        logger.info(
            "sheets_export_completed",
            sheet=self._sheet_name,
            row_count=row_count,
        )
        return row_count

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write(self, sheet: gspread.Worksheet, values: list[list]) -> None:
        sheet.clear()
        sheet.update(values=values, range_name="A1", value_input_option="RAW")
