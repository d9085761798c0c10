"""
Tests for AppState and the reducer.
"""

from datetime import date

import pytest

from finsight.core.state import AppState, reduce, records_from_dicts, changed_documents
from finsight.core.models import Transaction, Debt
from finsight.utils.error_utils import FinsightError

TODAY = date(2026, 2, 14)


@pytest.fixture
def state():
    return AppState(
        transactions=[
            Transaction(id="t1", type="income", category="Salary", amount=5200, date="2026-02-01"),
            Transaction(id="t2", type="expense", category="Housing", amount=1400, date="2026-02-01"),
        ],
        debts=[
            Debt(id="d1", name="Card", type="Credit Card", balance=3200, interest_rate=21.99, minimum_payment=85),
        ],
        today=TODAY,
    )


class TestAppState:
    """Test state construction and helpers."""

    def test_defaults(self):
        state = AppState(today=TODAY)

        assert state.view == "monthly"
        assert state.active_tab == "dashboard"
        assert state.selected_date == "2026-02-14"
        assert state.selected_month == "2026-02"
        assert state.selected_year == "2026"
        assert state.transactions == ()

    def test_reference_follows_view(self, state):
        assert state.reference == "2026-02"
        assert state.replace(view="daily").reference == "2026-02-14"
        assert state.replace(view="yearly").reference == "2026"

    def test_find(self, state):
        assert state.find("transactions", "t2").category == "Housing"
        assert state.find("transactions", "missing") is None

    def test_export(self, state):
        exported = state.export()

        assert list(exported) == ["transactions", "investments", "debts"]
        assert [tx["id"] for tx in exported["transactions"]] == ["t1", "t2"]
        assert exported["investments"] == []
        assert exported["debts"][0]["interestRate"] == 21.99

    def test_settings(self, state):
        assert state.settings() == {"view": "monthly", "activeTab": "dashboard"}


class TestRecordActions:
    """Test add, update and delete actions."""

    def test_add_appends(self, state):
        new_state = reduce(state, {
            "type": "add_transaction",
            "payload": {"type": "expense", "category": "Transport", "amount": 60, "date": "2026-02-03"},
        })

        assert new_state is not state
        assert len(new_state.transactions) == 3
        added = new_state.transactions[-1]
        assert added.category == "Transport"
        assert len(added.id) == 9
        assert len(state.transactions) == 2

    def test_add_keeps_other_collections(self, state):
        new_state = reduce(state, {
            "type": "add_investment",
            "payload": {"name": "VOO", "type": "ETFs", "shares": 10, "purchasePrice": 420, "currentPrice": 512.8},
        })

        assert new_state.transactions is state.transactions
        assert new_state.debts is state.debts
        assert len(new_state.investments) == 1

    def test_add_defaults_date_to_today(self, state):
        new_state = reduce(state, {"type": "add_transaction", "payload": {"category": "Other", "amount": 5}})
        assert new_state.transactions[-1].date == date.today().isoformat()
        assert new_state.transactions[-1].type == "expense"

    @pytest.mark.parametrize("payload", [
        {"category": "Other"},
        {"amount": 10},
        {"category": "Other", "amount": -5},
        {"category": "Other", "amount": "abc"},
        {"category": "", "amount": 10},
        {"type": "transfer", "category": "Other", "amount": 10},
    ])
    def test_add_invalid_is_ignored(self, state, payload):
        assert reduce(state, {"type": "add_transaction", "payload": payload}) is state

    def test_add_duplicate_id_is_ignored(self, state):
        action = {"type": "add_transaction", "payload": {"id": "t1", "category": "Other", "amount": 10}}
        assert reduce(state, action) is state

    def test_update_merges(self, state):
        new_state = reduce(state, {"type": "update_debt", "id": "d1", "payload": {"balance": 3000}})

        debt = new_state.find("debts", "d1")
        assert debt.balance == 3000
        assert debt.interest_rate == 21.99
        assert debt.name == "Card"

    def test_update_keeps_position(self, state):
        new_state = reduce(state, {"type": "update_transaction", "id": "t1", "payload": {"amount": 5300}})
        assert [tx.id for tx in new_state.transactions] == ["t1", "t2"]
        assert new_state.transactions[0].amount == 5300

    def test_update_cannot_change_id(self, state):
        new_state = reduce(state, {"type": "update_transaction", "id": "t1", "payload": {"id": "zzz", "note": "x"}})
        assert new_state.find("transactions", "t1").note == "x"
        assert new_state.find("transactions", "zzz") is None

    def test_update_unknown_id_is_ignored(self, state):
        assert reduce(state, {"type": "update_debt", "id": "nope", "payload": {"balance": 1}}) is state

    def test_update_invalid_is_ignored(self, state):
        assert reduce(state, {"type": "update_debt", "id": "d1", "payload": {"interestRate": 150}}) is state

    def test_delete(self, state):
        new_state = reduce(state, {"type": "delete_transaction", "id": "t1"})
        assert [tx.id for tx in new_state.transactions] == ["t2"]

    def test_delete_unknown_id_is_ignored(self, state):
        assert reduce(state, {"type": "delete_transaction", "id": "nope"}) is state


class TestSettingActions:
    """Test view, tab and period selection actions."""

    def test_set_view(self, state):
        new_state = reduce(state, {"type": "set_view", "view": "yearly"})
        assert new_state.view == "yearly"
        assert new_state.transactions is state.transactions

    def test_set_same_view_is_noop(self, state):
        assert reduce(state, {"type": "set_view", "view": "monthly"}) is state

    def test_set_unknown_view_is_ignored(self, state):
        assert reduce(state, {"type": "set_view", "view": "weekly"}) is state

    def test_set_tab(self, state):
        assert reduce(state, {"type": "set_tab", "tab": "debts"}).active_tab == "debts"

    def test_select_period(self, state):
        new_state = reduce(state, {"type": "select_period", "date": "2026-01-05", "month": "2026-01", "year": "2025"})

        assert new_state.selected_date == "2026-01-05"
        assert new_state.selected_month == "2026-01"
        assert new_state.selected_year == "2025"

    def test_select_period_ignores_bad_date(self, state):
        assert reduce(state, {"type": "select_period", "date": "Jan 5"}) is state

    def test_unknown_action_is_ignored(self, state):
        assert reduce(state, {"type": "explode"}) is state
        assert reduce(state, {}) is state


class TestBulkActions:
    """Test replace_all and clear_all."""

    def test_replace_all(self, state):
        new_state = reduce(state, {
            "type": "replace_all",
            "transactions": [{"id": "n1", "type": "income", "category": "Gifts", "amount": 100, "date": "2026-02-02"}],
        })

        assert [tx.id for tx in new_state.transactions] == ["n1"]
        assert new_state.debts is state.debts

    def test_replace_all_invalid_changes_nothing(self, state):
        new_state = reduce(state, {
            "type": "replace_all",
            "transactions": [],
            "debts": [{"id": "x", "name": "Bad"}],
        })
        assert new_state is state

    def test_clear_all(self, state):
        new_state = reduce(state, {"type": "clear_all"})

        assert new_state.transactions == ()
        assert new_state.investments == ()
        assert new_state.debts == ()
        assert new_state.view == state.view


class TestHelpers:
    """Test record conversion and change detection."""

    def test_records_from_dicts(self):
        records = records_from_dicts("debts", [
            {"id": "a", "name": "Card", "type": "Credit Card", "balance": 100, "interestRate": 10},
        ])
        assert records[0].minimum_payment == 0

    def test_records_from_dicts_none(self):
        assert records_from_dicts("transactions", None) == ()

    def test_records_from_dicts_rejects_duplicates(self):
        item = {"id": "a", "category": "Other", "amount": 1, "date": "2026-02-01"}
        with pytest.raises(FinsightError):
            records_from_dicts("transactions", [item, dict(item)])

    def test_records_from_dicts_rejects_non_objects(self):
        with pytest.raises(FinsightError):
            records_from_dicts("transactions", ["oops"])

    def test_changed_documents(self, state):
        added = reduce(state, {"type": "add_transaction", "payload": {"category": "Other", "amount": 5}})
        assert changed_documents(state, added) == ["transactions"]

        viewed = reduce(state, {"type": "set_view", "view": "daily"})
        assert changed_documents(state, viewed) == ["settings"]

        selected = reduce(state, {"type": "select_period", "month": "2026-01"})
        assert changed_documents(state, selected) == []

        cleared = reduce(state, {"type": "clear_all"})
        changed = changed_documents(state, cleared)
        assert "transactions" in changed
        assert "debts" in changed
        assert "settings" not in changed

        assert changed_documents(state, state) == []
