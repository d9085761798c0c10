"""
Debt payoff model.

Estimates how long a debt takes to reach zero at its minimum payment using
the closed-form amortization formula:

    months = ceil( -ln(1 - B*r/P) / ln(1 + r) )

where B is the balance, P the monthly payment and r the monthly rate
(APR / 100 / 12). A payment that does not exceed the interest accruing each
month (P <= B*r) never pays the debt off.
"""

import math
from typing import Any, Dict, Optional

import numpy_financial as npf
import pandas as pd

from finsight.core.constants import (
    NEVER_PAYOFF_MONTHS,
    PAYOFF_BAR_MAX_MONTHS,
    PAYOFF_HIGH_MONTHS,
    PAYOFF_MEDIUM_MONTHS,
)
from finsight.core.models import Debt
from finsight.utils.rate_utils import annual_pct_to_monthly_decimal, MONTHS_PER_YEAR

SCHEDULE_COLUMNS = ["month", "payment", "interest", "principal", "balance", "total_interest"]


class PayoffEstimate:
    """
    Result of a payoff calculation.

    Attributes:
        months: Whole months until the balance reaches zero, None when never
        total_interest: Interest paid over the payoff period (0 when never
            or when the debt carries no interest)
    """

    def __init__(self, months: Optional[int], total_interest: float = 0.0):
        self.months = months
        self.total_interest = total_interest

    @property
    def never(self) -> bool:
        return self.months is None

    @property
    def display_months(self) -> int:
        """Month count used for progress bars; "never" maps to NEVER_PAYOFF_MONTHS."""
        return NEVER_PAYOFF_MONTHS if self.never else self.months

    @property
    def label(self) -> str:
        if self.never:
            return "Never (increase payments)"
        years, remainder = divmod(self.months, MONTHS_PER_YEAR)
        if years > 0:
            return f"{years}y {remainder}m"
        return f"{remainder}m"

    @property
    def severity(self) -> str:
        if self.never or self.months > PAYOFF_HIGH_MONTHS:
            return "high"
        if self.months > PAYOFF_MEDIUM_MONTHS:
            return "medium"
        return "low"

    @property
    def bar_pct(self) -> float:
        """Share of the 30-year bar filled by this payoff period."""
        if self.never:
            return 100.0
        return min(self.months, PAYOFF_BAR_MAX_MONTHS) / PAYOFF_BAR_MAX_MONTHS * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "months": self.months,
            "never": self.never,
            "label": self.label,
            "totalInterest": self.total_interest,
            "severity": self.severity,
            "barPct": self.bar_pct,
        }

    def __eq__(self, other):
        if not isinstance(other, PayoffEstimate):
            return NotImplemented
        return self.months == other.months and self.total_interest == other.total_interest

    def __repr__(self):
        return f"<PayoffEstimate(months={self.months}, total_interest={self.total_interest})>"


def estimate_payoff(balance: float, interest_rate: float, minimum_payment: float) -> PayoffEstimate:
    """
    Months to pay off a debt at its minimum payment.

    Args:
        balance: Outstanding balance
        interest_rate: APR as a percentage
        minimum_payment: Monthly payment

    Returns:
        PayoffEstimate; never is True when no payment is made or the payment
        does not cover the monthly interest
    """
    if not minimum_payment or minimum_payment <= 0:
        return PayoffEstimate(None)

    if interest_rate > 0:
        monthly_rate = annual_pct_to_monthly_decimal(interest_rate)
        if minimum_payment <= balance * monthly_rate:
            return PayoffEstimate(None)
        months = math.ceil(
            -math.log(1 - (balance * monthly_rate / minimum_payment)) / math.log(1 + monthly_rate)
        )
        return PayoffEstimate(months, minimum_payment * months - balance)

    return PayoffEstimate(math.ceil(balance / minimum_payment))


def estimate_debt_payoff(debt: Debt) -> PayoffEstimate:
    """Payoff estimate for a Debt record."""
    return estimate_payoff(debt.balance, debt.interest_rate, debt.minimum_payment)


def required_payment(balance: float, interest_rate: float, months: int) -> float:
    """
    Fixed monthly payment that clears a balance in the given number of months.

    Examples:
        >>> round(required_payment(1200, 0, 12), 2)
        100.0
    """
    if months <= 0:
        raise ValueError("months must be positive")
    if balance <= 0:
        return 0.0
    monthly_rate = annual_pct_to_monthly_decimal(interest_rate)
    if monthly_rate == 0:
        return balance / months
    return float(-npf.pmt(monthly_rate, months, balance))


def payoff_schedule(debt: Debt) -> pd.DataFrame:
    """
    Month-by-month amortization at the minimum payment.

    The final payment covers only what is left, so the schedule's total
    interest can be lower than PayoffEstimate.total_interest, which assumes
    every payment is made in full.

    Returns:
        DataFrame with columns: month, payment, interest, principal, balance,
        total_interest. Empty when the debt is never paid off.
    """
    estimate = estimate_debt_payoff(debt)
    if estimate.never or debt.balance <= 0:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)

    monthly_rate = annual_pct_to_monthly_decimal(debt.interest_rate)
    balance = debt.balance
    rows = {"month": [], "payment": [], "interest": [], "principal": []}
    remaining = []

    for month in range(1, estimate.months + 1):
        interest = balance * monthly_rate
        if debt.minimum_payment >= balance + interest:
            payment = balance + interest
            principal = balance
            balance = 0.0
        else:
            payment = debt.minimum_payment
            principal = payment - interest
            balance -= principal

        rows["month"].append(month)
        rows["payment"].append(payment)
        rows["interest"].append(interest)
        rows["principal"].append(principal)
        remaining.append(balance)

        if balance == 0.0:
            break

    df = pd.DataFrame.from_dict(rows)
    df["balance"] = remaining
    df["total_interest"] = df["interest"].cumsum()
    return df[SCHEDULE_COLUMNS]
