"""
Rolling-average cash-flow projection.

Forecasts income and expense as the mean of the most recent months with
any activity, then extends that average over future months.
"""

from typing import Dict, List

import numpy as np
import pandas as pd

from finsight.core.constants import (
    ROLLING_WINDOW_MONTHS,
    TIMELINE_PAST_MONTHS,
    TIMELINE_FORWARD_MONTHS,
)
from finsight.utils.date_utils import month_label
from finsight.utils.rate_utils import MONTHS_PER_YEAR


def _mean(values: List[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def rolling_averages(monthly: Dict[str, Dict[str, float]], window: int = ROLLING_WINDOW_MONTHS) -> Dict[str, float]:
    """
    Mean monthly income and expense over the last `window` months on record.

    Fewer months than the window are averaged over the months that exist;
    no months gives zeros.
    """
    last = [monthly[key] for key in sorted(monthly)[-window:]]
    return {
        "avgIncome": _mean([m["income"] for m in last]),
        "avgExpense": _mean([m["expense"] for m in last]),
        "months": len(last),
    }


def yearly_projection(monthly: Dict[str, Dict[str, float]]) -> Dict[str, float]:
    """
    Annualized income, expense and savings from the rolling averages.

    savingsRate is 0 when there is no average income.
    """
    averages = rolling_averages(monthly)
    avg_income = averages["avgIncome"]
    avg_expense = averages["avgExpense"]
    return {
        "monthlyIncome": avg_income,
        "monthlyExpense": avg_expense,
        "annualIncome": avg_income * MONTHS_PER_YEAR,
        "annualExpense": avg_expense * MONTHS_PER_YEAR,
        "annualNet": (avg_income - avg_expense) * MONTHS_PER_YEAR,
        "savingsRate": ((avg_income - avg_expense) / avg_income * 100) if avg_income > 0 else 0.0,
    }


def projection_timeline(
    monthly: Dict[str, Dict[str, float]],
    current_month: str,
    past: int = TIMELINE_PAST_MONTHS,
    forward: int = TIMELINE_FORWARD_MONTHS,
) -> List[Dict]:
    """
    Actual and projected monthly cash flow around the current month.

    Covers `past` months before the current month through `forward` months
    after it. Months after the current one are projected: they carry the
    average of the last three months in the window (up to and including the
    current month) that had any income or expense.

    Args:
        monthly: Output of monthly_totals
        current_month: YYYY-MM of "now"
        past: Months of history to show
        forward: Months to project

    Returns:
        One dict per month: month, label, income, expense, net,
        isProjection, isCurrent
    """
    current = pd.Period(current_month, freq="M")
    periods = pd.period_range(start=current - past, end=current + forward, freq="M")

    frame = pd.DataFrame({"month": [p.strftime("%Y-%m") for p in periods]})
    frame["offset"] = range(-past, forward + 1)
    frame["income"] = [float(monthly.get(key, {}).get("income", 0.0)) for key in frame["month"]]
    frame["expense"] = [float(monthly.get(key, {}).get("expense", 0.0)) for key in frame["month"]]
    frame["isProjection"] = frame["offset"] > 0

    history = frame[~frame["isProjection"]]
    active = history[(history["income"] > 0) | (history["expense"] > 0)].tail(ROLLING_WINDOW_MONTHS)
    avg_income = _mean([float(v) for v in active["income"]])
    avg_expense = _mean([float(v) for v in active["expense"]])

    reference_year = current.strftime("%Y")
    points = []
    for row in frame.itertuples(index=False):
        projected = bool(row.isProjection)
        income = avg_income if projected else float(row.income)
        expense = avg_expense if projected else float(row.expense)
        points.append({
            "month": row.month,
            "label": month_label(row.month, reference_year),
            "income": income,
            "expense": expense,
            "net": income - expense,
            "isProjection": projected,
            "isCurrent": int(row.offset) == 0,
        })
    return points
