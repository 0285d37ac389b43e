"""Ledger package."""

from expense_ledger.ledger.store import ExpenseLedger

__all__ = ["ExpenseLedger"]
