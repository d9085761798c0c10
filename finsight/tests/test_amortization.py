"""
Tests for debt payoff estimates and schedules.
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from finsight.core.engine import (
    PayoffEstimate,
    estimate_payoff,
    estimate_debt_payoff,
    required_payment,
    payoff_schedule,
)
from finsight.core.models import Debt


def test_credit_card_payoff():
    """21.99% APR at $85/month on $3,200."""
    estimate = estimate_payoff(3200, 21.99, 85)

    assert estimate.months == 65
    assert not estimate.never
    assert estimate.label == "5y 5m"
    assert estimate.severity == "medium"
    assert estimate.total_interest == pytest.approx(85 * 65 - 3200)


def test_payment_below_interest_never_pays_off():
    """$100/month does not cover 2% monthly interest on $10,000."""
    estimate = estimate_payoff(10000, 24, 100)

    assert estimate.never
    assert estimate.months is None
    assert estimate.label == "Never (increase payments)"
    assert estimate.severity == "high"
    assert estimate.display_months == 999
    assert estimate.bar_pct == 100
    assert estimate.total_interest == 0


def test_payment_equal_to_interest_never_pays_off():
    assert estimate_payoff(1000, 12, 10).never


def test_zero_payment_never_pays_off():
    assert estimate_payoff(500, 5, 0).never
    assert estimate_payoff(500, 0, 0).never


def test_zero_interest_payoff():
    estimate = estimate_payoff(1200, 0, 100)

    assert estimate.months == 12
    assert estimate.total_interest == 0
    assert estimate.label == "1y 0m"
    assert estimate.severity == "low"


def test_short_payoff_label():
    assert estimate_payoff(500, 0, 100).label == "5m"


def test_severity_thresholds():
    assert PayoffEstimate(60).severity == "low"
    assert PayoffEstimate(61).severity == "medium"
    assert PayoffEstimate(120).severity == "medium"
    assert PayoffEstimate(121).severity == "high"


def test_bar_pct_caps_at_thirty_years():
    assert PayoffEstimate(180).bar_pct == pytest.approx(50)
    assert PayoffEstimate(500).bar_pct == 100


def test_estimate_to_dict():
    data = estimate_payoff(1200, 0, 100).to_dict()
    assert data == {
        "months": 12,
        "never": False,
        "label": "1y 0m",
        "totalInterest": 0.0,
        "severity": "low",
        "barPct": pytest.approx(12 / 360 * 100),
    }


def test_estimate_debt_payoff_reads_record():
    debt = Debt(id="cc", name="Card", type="Credit Card", balance=3200, interest_rate=21.99, minimum_payment=85)
    assert estimate_debt_payoff(debt) == estimate_payoff(3200, 21.99, 85)


class TestRequiredPayment:
    """Test the fixed payment needed for a target payoff period."""

    def test_zero_rate(self):
        assert required_payment(1200, 0, 12) == pytest.approx(100)

    def test_with_interest(self):
        payment = required_payment(3200, 21.99, 65)
        assert 3200 * 0.2199 / 12 < payment <= 85
        assert required_payment(3200, 21.99, 24) > payment

    def test_zero_balance(self):
        assert required_payment(0, 10, 12) == 0

    def test_months_must_be_positive(self):
        with pytest.raises(ValueError):
            required_payment(1000, 5, 0)


class TestPayoffSchedule:
    """Test the month-by-month amortization table."""

    def test_zero_rate_schedule(self):
        debt = Debt(id="d", name="Loan", type="Personal Loan", balance=1200, interest_rate=0, minimum_payment=100)
        schedule = payoff_schedule(debt)

        assert len(schedule) == 12
        assert list(schedule["month"]) == list(range(1, 13))
        assert schedule["principal"].sum() == pytest.approx(1200)
        assert schedule["interest"].sum() == 0
        assert schedule["balance"].iloc[-1] == 0

    def test_schedule_ends_at_zero(self):
        debt = Debt(id="cc", name="Card", type="Credit Card", balance=3200, interest_rate=21.99, minimum_payment=85)
        schedule = payoff_schedule(debt)

        assert len(schedule) == 65
        assert schedule["balance"].iloc[-1] == 0
        assert schedule["payment"].iloc[-1] < 85
        assert (schedule["balance"].diff().dropna() < 0).all()
        assert schedule["total_interest"].iloc[-1] <= estimate_debt_payoff(debt).total_interest

    def test_never_gives_empty_schedule(self):
        debt = Debt(id="x", name="Big", type="Other", balance=10000, interest_rate=24, minimum_payment=100)
        schedule = payoff_schedule(debt)

        assert schedule.empty
        assert list(schedule.columns) == ["month", "payment", "interest", "principal", "balance", "total_interest"]
