"""
Ledger Orchestrator

Ties the ledger, the date filter, the aggregation engine and the export
serializer together for a presentation layer.

Flow for one screen refresh:
1. Filter → the ledger's expenses narrowed to the selected window
2. Aggregate → total, category breakdown and budget status of the window
3. Trend → monthly totals over the FULL history (never the window)
4. Export → the same filtered expenses as sheet rows, on request

DESIGN DECISION: The budget is an undated threshold. It is measured
against whatever window is selected, not reset per calendar month.
"""

from pathlib import Path
from typing import Optional, Union

from expense_ledger.analytics import (
    budget_status,
    category_totals,
    filter_expenses,
    monthly_trend,
    total_amount,
)
from expense_ledger.config import Settings, get_settings
from expense_ledger.export import export_rows
from expense_ledger.ledger import ExpenseLedger
from expense_ledger.models.expense import Expense, ExportRow, LedgerSummary, WindowKind
from expense_ledger.services.clock import Clock, SystemClock
from expense_ledger.services.storage import JsonFileStorage, KeyValueStorage


class LedgerDashboard:
    """
    Read-side view over an ExpenseLedger.

    Holds no state of its own; every call reads the ledger afresh and
    takes "now" from the injected clock.
    """

    def __init__(
        self,
        ledger: ExpenseLedger,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        self._ledger = ledger
        self._clock = clock or SystemClock()
        self._settings = settings or get_settings()

    @property
    def ledger(self) -> ExpenseLedger:
        return self._ledger

    def visible_expenses(self, window: Union[WindowKind, str] = WindowKind.ALL) -> list[Expense]:
        return filter_expenses(self._ledger.list(), window, self._clock.now())

    def summary(self, window: Union[WindowKind, str] = WindowKind.ALL) -> LedgerSummary:
        """Totals, breakdown, budget status and trend for one window."""
        window = WindowKind(window)
        ledger_settings = self._settings.ledger
        all_expenses = self._ledger.list()
        visible = filter_expenses(all_expenses, window, self._clock.now())
        total = total_amount(visible)

        return LedgerSummary(
            window=window,
            expense_count=len(visible),
            total=total,
            category_totals=category_totals(visible),
            budget_status=budget_status(total, self._ledger.get_budget(), ledger_settings),
            trend=monthly_trend(all_expenses, ledger_settings.trend_months),
        )

    def export(self, window: Union[WindowKind, str] = WindowKind.ALL) -> list[ExportRow]:
        """Sheet rows for the expenses visible in ``window``."""
        return export_rows(
            self.visible_expenses(window),
            self._settings.export.date_format,
        )


def create_ledger(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    clock: Optional[Clock] = None,
    data_path: Optional[Union[str, Path]] = None,
) -> ExpenseLedger:
    """
    Build a ledger from configuration.

    Storage defaults to a JSON file at ``data_path`` (or the configured
    LEDGER_DATA_PATH).
    """
    settings = settings or get_settings()
    ledger_settings = settings.ledger
    if storage is None:
        storage = JsonFileStorage(data_path or ledger_settings.data_path)
    return ExpenseLedger(storage=storage, clock=clock, settings=ledger_settings)


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    clock: Optional[Clock] = None,
) -> tuple[ExpenseLedger, LedgerDashboard]:
    """Ledger and dashboard sharing one clock, ready for a UI to use."""
    settings = settings or get_settings()
    clock = clock or SystemClock()
    ledger = create_ledger(settings=settings, storage=storage, clock=clock)
    return ledger, LedgerDashboard(ledger, clock=clock, settings=settings)
