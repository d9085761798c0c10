"""
Basic tests for Finsight record models.

Tests construction, validation and camelCase serialization of transactions,
investments and debts.
"""

import pytest

from finsight.core.models import Transaction, Investment, Debt, generate_id
from finsight.core.models.record import missing_fields, to_amount, to_optional_amount
from finsight.utils.error_utils import FinsightError


class TestRecordHelpers:
    """Test shared record helpers."""

    def test_generate_id(self):
        ids = {generate_id() for _ in range(200)}
        assert len(ids) == 200
        for record_id in ids:
            assert len(record_id) == 9
            assert record_id.isalnum() and record_id == record_id.lower()

    def test_missing_fields(self):
        data = {"name": "AAPL", "type": " ", "shares": None}
        assert missing_fields(data, ("name", "type", "shares", "note")) == ["type", "shares", "note"]

    def test_to_amount(self):
        assert to_amount("12.5", "amount") == 12.5
        assert to_amount(0, "amount") == 0.0

        for bad in (-1, "abc", float("nan"), float("inf"), True, None):
            with pytest.raises(ValueError):
                to_amount(bad, "amount")

    def test_to_optional_amount(self):
        assert to_optional_amount(None, "creditLimit") is None
        assert to_optional_amount("", "creditLimit") is None
        assert to_optional_amount(0, "creditLimit") is None
        assert to_optional_amount(12000, "creditLimit") == 12000.0


class TestTransaction:
    """Test Transaction creation and serialization."""

    def test_creation(self):
        tx = Transaction(id="t1", type="expense", category="Housing", amount=1400, date="2026-02-01", note="Rent")

        assert tx.amount == 1400.0
        assert tx.signed_amount == -1400.0
        assert not tx.is_income
        assert tx.date == "2026-02-01"

    def test_serialization(self):
        tx = Transaction(id="t1", type="income", category="Salary", amount=5200, date="01/02/2026")
        tx_dict = tx.to_dict()

        assert tx_dict == {
            "id": "t1",
            "type": "income",
            "category": "Salary",
            "amount": 5200.0,
            "date": "2026-02-01",
            "note": "",
        }
        assert Transaction.from_dict(tx_dict) == tx

    def test_from_dict_defaults(self):
        tx = Transaction.from_dict({"category": "Food & Dining", "amount": "45"})

        assert tx.type == "expense"
        assert len(tx.id) == 9
        assert tx.amount == 45.0
        assert len(tx.date) == 10

    def test_from_dict_id_override(self):
        tx = Transaction.from_dict({"id": "old", "category": "Gifts", "amount": 10, "type": "income"}, id="new")
        assert tx.id == "new"

    def test_invalid(self):
        with pytest.raises(FinsightError):
            Transaction.from_dict({"category": "Housing"})

        with pytest.raises(FinsightError):
            Transaction.from_dict({"category": "Housing", "amount": -5})

        with pytest.raises(FinsightError):
            Transaction.from_dict({"category": "Housing", "amount": 5, "type": "transfer"})


class TestInvestment:
    """Test Investment derived values and serialization."""

    def test_value_and_cost(self):
        inv = Investment(
            id="i1", name="AAPL", type="Stocks", shares=15, purchase_price=178.50, current_price=242.30
        )

        assert inv.value == pytest.approx(3634.5)
        assert inv.cost == pytest.approx(2677.5)
        assert inv.purchase_date is None

    def test_serialization(self):
        data = {
            "id": "i1",
            "name": "BTC",
            "type": "Crypto",
            "shares": 0.15,
            "purchasePrice": 42000,
            "currentPrice": 97500,
            "purchaseDate": "2024-03-20",
            "note": "Bitcoin",
        }
        inv = Investment.from_dict(data)

        assert inv.shares == 0.15
        assert inv.to_dict()["purchasePrice"] == 42000.0
        assert inv.to_dict()["purchaseDate"] == "2024-03-20"
        assert Investment.from_dict(inv.to_dict()) == inv

    def test_stored_null_purchase_date_survives(self):
        inv = Investment.from_dict(
            {"id": "i1", "name": "X", "type": "Other", "shares": 1, "purchasePrice": 1, "currentPrice": 1, "purchaseDate": None}
        )
        assert inv.purchase_date is None

    def test_missing_price(self):
        with pytest.raises(FinsightError):
            Investment.from_dict({"name": "VOO", "type": "ETFs", "shares": 10, "purchasePrice": 420})


class TestDebt:
    """Test Debt normalization and serialization."""

    def test_creation(self):
        debt = Debt(
            id="d1",
            name="Chase Sapphire",
            type="Credit Card",
            balance=3200,
            interest_rate="21.99%",
            minimum_payment=85,
            credit_limit=12000,
            due_date="2026-02-25",
        )

        assert debt.interest_rate == 21.99
        assert debt.has_credit_limit
        assert debt.to_dict()["creditLimit"] == 12000.0
        assert debt.to_dict()["interestRate"] == 21.99

    def test_zero_credit_limit_means_none(self):
        debt = Debt.from_dict({"name": "Loan", "type": "Personal Loan", "balance": 500, "interestRate": 5, "creditLimit": 0})

        assert debt.credit_limit is None
        assert not debt.has_credit_limit

    def test_minimum_payment_defaults_to_zero(self):
        debt = Debt.from_dict({"name": "Loan", "type": "Other", "balance": 500, "interestRate": 0})
        assert debt.minimum_payment == 0.0

    def test_invalid_rate(self):
        with pytest.raises(FinsightError):
            Debt.from_dict({"name": "Loan", "type": "Other", "balance": 500, "interestRate": 120})

    def test_round_trip(self):
        debt = Debt.from_dict(
            {"id": "d9", "name": "Toyota", "type": "Car Loan", "balance": 14200, "interestRate": 5.49, "minimumPayment": 385}
        )
        assert Debt.from_dict(debt.to_dict()) == debt
