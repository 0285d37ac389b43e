"""
Expense Ledger - Source Package

A single-user personal expense ledger: record expenses, classify them by
category, track them against a budget, and derive summary views.

DESIGN PRINCIPLES:
1. Validate before every mutation, reject loudly
2. Persist on every mutation, never lose the in-memory state
3. Storage and clock are injected, never global
4. Derived views are pure functions of the recorded expenses
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"
