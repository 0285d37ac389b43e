"""
Ledger Store

The ExpenseLedger owns the expense collection and the budget scalar and is
the only writer of both.

Lifecycle:
1. Construct → load both values from storage (corrupt or missing state
   falls back to an empty ledger and the default budget)
2. Mutate → validate, apply in memory, write to storage before returning
3. Read → callers get copies; the ledger's own records are never exposed

DESIGN DECISION: In-memory state is authoritative for the session.
If a storage write fails the mutation still stands, the failure is logged
as a warning, and the key is rewritten by the next mutation that
reaches storage. Nothing is queued or batched; every write is
synchronous.

DESIGN DECISION: Ids come from a monotonic counter seeded from the highest
id ever loaded. Two creates in the same instant can never collide, and an
id is never reused within a session, even after a delete.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from expense_ledger.config import LedgerSettings, get_settings
from expense_ledger.errors import NotFoundError
from expense_ledger.log import get_logger
from expense_ledger.models.expense import Expense, as_local_naive
from expense_ledger.services.clock import Clock, SystemClock
from expense_ledger.services.storage import KeyValueStorage, StorageError
from expense_ledger.validation import merge_patch, validate_budget, validate_expense


logger = get_logger(__name__)


class ExpenseLedger:
    """
    Single-user expense ledger with a budget.

    Args:
        storage: Durable key-value storage the ledger loads from and
                 writes to.
        clock: Source of creation timestamps. Defaults to local time.
        settings: Storage keys and default budget. Defaults to the
                  application settings.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Optional[Clock] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._storage = storage
        self._clock = clock or SystemClock()
        self._settings = settings or get_settings().ledger

        self._expenses: list[Expense] = []
        self._budget: Decimal = self._settings.default_budget
        self._next_id = 1
        self._pending: set[str] = set()

        self._load()

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def create(self, data: Mapping[str, Any]) -> Expense:
        """
        Record a new expense.

        Raises:
            InvalidInputError: If the proposal fails validation. Nothing
                               is recorded or written in that case.
        """
        draft = validate_expense(data)

        expense = Expense(
            id=self._next_id,
            description=draft.description,
            amount=draft.amount,
            category=draft.category,
            created_at=as_local_naive(self._clock.now()),
        )
        self._next_id += 1
        self._expenses.append(expense)
        self._persist(self._settings.expenses_key)

        logger.info(
            "expense_created",
            expense_id=expense.id,
            category=expense.category.value,
            amount=str(expense.amount),
        )
        return expense.model_copy()

    def update(self, expense_id: int, patch: Mapping[str, Any]) -> Expense:
        """
        Replace the description, amount and/or category of an expense.

        The id and creation time never change.

        Raises:
            NotFoundError: If no expense has ``expense_id``
            InvalidInputError: If the merged result fails validation
        """
        index = self._index_of(expense_id)
        current = self._expenses[index]
        draft = validate_expense(merge_patch(current, patch))

        updated = current.model_copy(update={
            "description": draft.description,
            "amount": draft.amount,
            "category": draft.category,
        })
        self._expenses[index] = updated
        self._persist(self._settings.expenses_key)

        logger.info("expense_updated", expense_id=expense_id)
        return updated.model_copy()

    def delete(self, expense_id: int) -> None:
        """Remove an expense if present. Unknown ids are ignored."""
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            logger.debug("expense_delete_ignored", expense_id=expense_id)
            return

        self._expenses = remaining
        self._persist(self._settings.expenses_key)
        logger.info("expense_deleted", expense_id=expense_id)

    def get(self, expense_id: int) -> Expense:
        """
        Raises:
            NotFoundError: If no expense has ``expense_id``
        """
        return self._expenses[self._index_of(expense_id)].model_copy()

    # -------------------------------------------------------------------------
    # Budget
    # -------------------------------------------------------------------------

    def get_budget(self) -> Decimal:
        return self._budget

    def set_budget(self, value: Any) -> None:
        """
        Store a new budget.

        Zero and negative values are stored as given.

        Raises:
            InvalidInputError: If ``value`` is not a finite number
        """
        self._budget = validate_budget(value)
        self._persist(self._settings.budget_key)
        logger.info("budget_set", budget=str(self._budget))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @property
    def pending_writes(self) -> frozenset[str]:
        """Storage keys whose last write failed and has not been retried yet."""
        return frozenset(self._pending)

    def _persist(self, key: str) -> None:
        """Write ``key`` plus any key left over from an earlier failed write."""
        self._pending.add(key)

        for pending_key in sorted(self._pending):
            try:
                self._storage.set(pending_key, self._serialize(pending_key))
            except StorageError as e:
                logger.warning("ledger_persist_failed", key=pending_key, error=str(e))
                continue

            self._pending.discard(pending_key)
            if pending_key != key:
                logger.info("ledger_persist_recovered", key=pending_key)

    def _serialize(self, key: str) -> str:
        if key == self._settings.expenses_key:
            return json.dumps([
                expense.model_dump(mode="json", by_alias=True)
                for expense in self._expenses
            ])
        return str(self._budget)

    def _load(self) -> None:
        self._expenses = self._load_expenses()
        self._budget = self._load_budget()
        self._next_id = max((e.id for e in self._expenses), default=0) + 1

        logger.info(
            "ledger_loaded",
            expense_count=len(self._expenses),
            budget=str(self._budget),
        )

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._storage.get(key)
        except StorageError as e:
            logger.warning("ledger_state_unreadable", key=key, error=str(e))
            return None

    def _load_expenses(self) -> list[Expense]:
        key = self._settings.expenses_key
        raw = self._read(key)
        if raw is None:
            return []

        try:
            data = json.loads(raw, parse_float=Decimal)
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of expenses")
            expenses = [Expense.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            logger.warning("ledger_state_corrupt", key=key, error=str(e))
            return []

        ids = [expense.id for expense in expenses]
        if len(set(ids)) != len(ids):
            logger.warning("ledger_state_corrupt", key=key, error="duplicate expense ids")
            return []
        return expenses

    def _load_budget(self) -> Decimal:
        key = self._settings.budget_key
        raw = self._read(key)
        if raw is None:
            return self._settings.default_budget

        try:
            budget = Decimal(raw.strip())
        except InvalidOperation:
            budget = None
        if budget is None or not budget.is_finite():
            logger.warning("ledger_state_corrupt", key=key, error=f"not a number: {raw!r}")
            return self._settings.default_budget
        return budget

    def _index_of(self, expense_id: int) -> int:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        raise NotFoundError(expense_id)

    # Defined last: inside the class body the name shadows the builtin.
    def list(self) -> list[Expense]:
        """All expenses in the order they were created."""
        return [expense.model_copy() for expense in self._expenses]

    def __len__(self) -> int:
        return len(self._expenses)
