"""Tests for the ExpenseLedger store."""

import json
from datetime import datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st
from structlog.testing import capture_logs

from expense_ledger.analytics import budget_status, category_totals, total_amount
from expense_ledger.config import LedgerSettings
from expense_ledger.errors import InvalidInputError, NotFoundError
from expense_ledger.ledger import ExpenseLedger
from expense_ledger.models.expense import BudgetTier, ExpenseCategory
from expense_ledger.services.clock import FixedClock
from expense_ledger.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageUnavailableError,
)


def events(logs: list[dict]) -> list[str]:
    return [entry["event"] for entry in logs]


class TestCreate:
    """Tests for recording expenses."""

    def test_create_assigns_id_and_timestamp(self, ledger, clock):
        expense = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        assert expense.id == 1
        assert expense.description == "Lunch"
        assert expense.amount == Decimal("500")
        assert expense.category is ExpenseCategory.FOOD
        assert expense.created_at == clock.now()

    def test_ids_are_unique_within_the_same_instant(self, ledger):
        first = ledger.create({"description": "Coffee", "amount": 3})
        second = ledger.create({"description": "Coffee", "amount": 3})
        assert first.id != second.id

    def test_ids_are_not_reused_after_delete(self, ledger):
        first = ledger.create({"description": "Coffee", "amount": 3})
        ledger.delete(first.id)
        second = ledger.create({"description": "Tea", "amount": 2})
        assert second.id > first.id

    def test_list_keeps_creation_order(self, ledger, clock):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        clock.advance(hours=1)
        ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})

        assert [e.description for e in ledger.list()] == ["Lunch", "Bus"]
        assert len(ledger) == 2

    def test_create_writes_expenses_key(self, ledger, storage):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        assert storage.writes == ["expenses"]
        stored = json.loads(storage.get("expenses"))
        assert stored == [{
            "id": 1,
            "description": "Lunch",
            "amount": 500,
            "category": "Food",
            "date": "2025-03-15T14:30:00",
        }]

    def test_invalid_create_records_nothing(self, ledger, storage):
        """An empty description is rejected and nothing is written."""
        with pytest.raises(InvalidInputError):
            ledger.create({"description": "", "amount": 10, "category": "Food"})

        assert ledger.list() == []
        assert storage.writes == []

    def test_create_logs_event(self, ledger):
        with capture_logs() as logs:
            expense = ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})

        created = [entry for entry in logs if entry["event"] == "expense_created"]
        assert created[0]["expense_id"] == expense.id
        assert created[0]["log_level"] == "info"


class TestReadCopies:
    """Callers never get hold of the ledger's own records."""

    def test_list_returns_copies(self, ledger):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        listed = ledger.list()
        listed[0].description = "Changed"
        listed.clear()

        assert ledger.list()[0].description == "Lunch"

    def test_create_returns_copy(self, ledger):
        expense = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        expense.amount = Decimal("1")
        assert ledger.get(expense.id).amount == Decimal("500")

    def test_get_unknown_id(self, ledger):
        with pytest.raises(NotFoundError) as exc_info:
            ledger.get(99)
        assert exc_info.value.expense_id == 99


class TestUpdate:
    """Tests for editing expenses."""

    def test_update_replaces_given_fields(self, ledger, clock):
        original = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        clock.advance(days=2)

        updated = ledger.update(original.id, {"amount": "650", "category": "entertainment"})

        assert updated.id == original.id
        assert updated.created_at == original.created_at
        assert updated.description == "Lunch"
        assert updated.amount == Decimal("650")
        assert updated.category is ExpenseCategory.ENTERTAINMENT
        assert ledger.get(original.id) == updated

    def test_update_ignores_identity_fields(self, ledger):
        original = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        updated = ledger.update(original.id, {"id": 77, "date": "2000-01-01T00:00:00", "description": None})

        assert updated == original

    def test_update_unknown_id_leaves_state_unchanged(self, ledger, storage):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        before = ledger.list()
        writes_before = list(storage.writes)

        with pytest.raises(NotFoundError):
            ledger.update(12345, {"amount": 10})

        assert ledger.list() == before
        assert storage.writes == writes_before

    def test_invalid_update_leaves_state_unchanged(self, ledger, storage):
        original = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        writes_before = list(storage.writes)

        with pytest.raises(InvalidInputError):
            ledger.update(original.id, {"amount": -5})

        assert ledger.get(original.id) == original
        assert storage.writes == writes_before

    def test_update_keeps_position(self, ledger):
        first = ledger.create({"description": "A", "amount": 1})
        ledger.create({"description": "B", "amount": 2})

        ledger.update(first.id, {"description": "A2"})

        assert [e.description for e in ledger.list()] == ["A2", "B"]


class TestDelete:
    """Tests for removing expenses."""

    def test_delete_removes_expense(self, ledger):
        lunch = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        bus = ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})

        ledger.delete(lunch.id)

        assert ledger.list() == [bus]

    def test_delete_unknown_id_is_noop(self, ledger, storage):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        writes_before = list(storage.writes)

        ledger.delete(999)
        ledger.delete(999)

        assert len(ledger) == 1
        assert storage.writes == writes_before

    def test_delete_twice_is_idempotent(self, ledger):
        lunch = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        ledger.delete(lunch.id)
        ledger.delete(lunch.id)
        assert ledger.list() == []


class TestBudget:
    """Tests for the budget scalar."""

    def test_default_budget(self, ledger):
        assert ledger.get_budget() == Decimal("10000")

    @pytest.mark.parametrize("value, expected", [
        (1000, Decimal("1000")),
        ("2500.75", Decimal("2500.75")),
        (0, Decimal("0")),
        (-100, Decimal("-100")),
    ])
    def test_set_budget_stores_value(self, ledger, storage, value, expected):
        ledger.set_budget(value)

        assert ledger.get_budget() == expected
        assert storage.writes == ["budget"]
        assert Decimal(storage.get("budget")) == expected

    @pytest.mark.parametrize("value", ["lots", None, float("nan")])
    def test_set_budget_rejects_non_numbers(self, ledger, storage, value):
        with pytest.raises(InvalidInputError):
            ledger.set_budget(value)

        assert ledger.get_budget() == Decimal("10000")
        assert storage.writes == []


class TestScenarios:
    """End-to-end flows through the ledger and aggregation engine."""

    def test_totals_after_two_creates(self, ledger):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})

        expenses = ledger.list()
        assert total_amount(expenses) == Decimal("600")
        assert category_totals(expenses) == {
            ExpenseCategory.FOOD: Decimal("500"),
            ExpenseCategory.TRANSPORT: Decimal("100"),
        }

    def test_budget_status_after_setting_budget(self, ledger, ledger_settings):
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})
        ledger.set_budget(1000)

        status = budget_status(total_amount(ledger.list()), ledger.get_budget(), ledger_settings)

        assert status.percentage == 60.0
        assert status.tier is BudgetTier.ON_TRACK


class TestPersistence:
    """Tests for loading and writing ledger state."""

    def test_state_survives_reload(self, ledger, storage, clock, ledger_settings):
        ledger.create({"description": "Lunch", "amount": "12.50", "category": "Food"})
        ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})
        ledger.set_budget(900)

        reloaded = ExpenseLedger(storage, clock=clock, settings=ledger_settings)

        assert reloaded.list() == ledger.list()
        assert reloaded.get_budget() == Decimal("900")

    @pytest.mark.parametrize("amount", ["12345.6789012345", "0.1", "1E+30", "99999999999999999999"])
    def test_precise_amounts_survive_reload(self, ledger, storage, clock, ledger_settings, amount):
        ledger.create({"description": "Precise", "amount": amount})

        reloaded = ExpenseLedger(storage, clock=clock, settings=ledger_settings)

        assert reloaded.list() == ledger.list()
        assert reloaded.list()[0].amount == Decimal(amount)

    def test_amount_too_precise_to_store_rejected(self, ledger, storage):
        with pytest.raises(InvalidInputError) as exc_info:
            ledger.create({"description": "A", "amount": "0.12345678901234567891"})

        assert exc_info.value.issues[0].field == "amount"
        assert ledger.list() == []
        assert storage.writes == []

    @given(amounts=st.lists(
        st.decimals(min_value=Decimal("0.01"), max_value=Decimal("1000000000"), places=2),
        min_size=1,
        max_size=10,
    ))
    def test_round_trip_reproduces_expenses(self, amounts):
        clock = FixedClock(datetime(2025, 3, 15, 14, 30))
        storage = InMemoryStorage()
        settings = LedgerSettings()
        ledger = ExpenseLedger(storage, clock=clock, settings=settings)
        for index, amount in enumerate(amounts):
            ledger.create({"description": f"Expense {index}", "amount": amount})

        reloaded = ExpenseLedger(storage, clock=clock, settings=settings)

        assert reloaded.list() == ledger.list()

    def test_ids_continue_after_reload(self, ledger, storage, clock, ledger_settings):
        ledger.create({"description": "A", "amount": 1})
        ledger.create({"description": "B", "amount": 2})

        reloaded = ExpenseLedger(storage, clock=clock, settings=ledger_settings)
        created = reloaded.create({"description": "C", "amount": 3})

        assert created.id == 3

    def test_empty_storage_gives_empty_ledger(self, ledger):
        assert ledger.list() == []
        assert ledger.get_budget() == Decimal("10000")

    def test_legacy_layout_loads(self, storage_factory, clock, ledger_settings):
        """Millisecond ids and locale dates from older ledgers are accepted."""
        storage = storage_factory({
            "expenses": json.dumps([{
                "id": 1700000000000,
                "description": "Groceries",
                "amount": 12.5,
                "category": "Food",
                "date": "3/14/2025",
            }]),
            "budget": "5000",
        })

        ledger = ExpenseLedger(storage, clock=clock, settings=ledger_settings)

        [expense] = ledger.list()
        assert expense.amount == Decimal("12.5")
        assert expense.created_at == datetime(2025, 3, 14)
        assert ledger.get_budget() == Decimal("5000")
        assert ledger.create({"description": "Tea", "amount": 2}).id == 1700000000001

    @pytest.mark.parametrize("raw", [
        "not json",
        '{"id": 1}',
        '[{"id": 1, "description": "Lunch"}]',
        '[{"id": 1, "description": "A", "amount": 1, "category": "Food", "date": "2025-01-01T00:00:00"},'
        ' {"id": 1, "description": "B", "amount": 2, "category": "Food", "date": "2025-01-02T00:00:00"}]',
    ])
    def test_corrupt_expenses_fall_back_to_empty(self, storage_factory, clock, ledger_settings, raw):
        storage = storage_factory({"expenses": raw, "budget": "700"})

        with capture_logs() as logs:
            ledger = ExpenseLedger(storage, clock=clock, settings=ledger_settings)

        assert ledger.list() == []
        assert ledger.get_budget() == Decimal("700")
        assert "ledger_state_corrupt" in events(logs)

    @pytest.mark.parametrize("raw", ["", "lots", "NaN", "Infinity"])
    def test_corrupt_budget_falls_back_to_default(self, storage_factory, clock, ledger_settings, raw):
        storage = storage_factory({"budget": raw})

        ledger = ExpenseLedger(storage, clock=clock, settings=ledger_settings)

        assert ledger.get_budget() == Decimal("10000")

    def test_unreadable_storage_gives_defaults(self, clock, ledger_settings):
        class BrokenStorage(InMemoryStorage):
            def get(self, key):
                raise StorageUnavailableError("disk gone")

        with capture_logs() as logs:
            ledger = ExpenseLedger(BrokenStorage(), clock=clock, settings=ledger_settings)

        assert ledger.list() == []
        assert ledger.get_budget() == Decimal("10000")
        assert events(logs).count("ledger_state_unreadable") == 2


class TestWriteFailures:
    """A failed write keeps the mutation and is retried by the next one."""

    def test_failed_write_keeps_mutation(self, ledger, storage):
        storage.fail_writes = True

        with capture_logs() as logs:
            expense = ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        assert ledger.get(expense.id) == expense
        assert ledger.pending_writes == frozenset({"expenses"})
        failed = [entry for entry in logs if entry["event"] == "ledger_persist_failed"]
        assert failed[0]["key"] == "expenses"
        assert failed[0]["log_level"] == "warning"

    def test_next_mutation_retries_pending_key(self, ledger, storage):
        storage.fail_writes = True
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})
        storage.fail_writes = False

        with capture_logs() as logs:
            ledger.set_budget(2000)

        assert ledger.pending_writes == frozenset()
        assert sorted(storage.writes) == ["budget", "expenses"]
        assert len(json.loads(storage.get("expenses"))) == 1
        assert "ledger_persist_recovered" in events(logs)

    def test_unreadable_file_marks_write_pending(self, tmp_path, monkeypatch, clock, ledger_settings):
        """A read error while writing leaves the file intact and the key pending."""
        path = tmp_path / "ledger.json"
        ledger = ExpenseLedger(JsonFileStorage(path), clock=clock, settings=ledger_settings)
        ledger.create({"description": "Lunch", "amount": 500, "category": "Food"})

        def locked(self, *args, **kwargs):
            raise PermissionError("locked by another process")

        monkeypatch.setattr(type(path), "read_text", locked)
        ledger.set_budget(2000)
        monkeypatch.undo()

        assert ledger.pending_writes == frozenset({"budget"})
        reloaded = ExpenseLedger(JsonFileStorage(path), clock=clock, settings=ledger_settings)
        assert [e.description for e in reloaded.list()] == ["Lunch"]

        ledger.create({"description": "Bus", "amount": 100, "category": "Transport"})

        assert ledger.pending_writes == frozenset()
        assert JsonFileStorage(path).get("budget") == "2000"
