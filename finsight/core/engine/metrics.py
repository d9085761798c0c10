"""
Derived statistics over transaction, investment and debt collections.

Every function here is pure: it reads the collections it is given, returns
plain dictionaries with camelCase keys (the shape the API serves) and never
raises for empty input. Ratios are defined as 0 when their denominator is 0.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from finsight.core.constants import EView, ETransactionType, PALETTE, DAYS_IN_TREND
from finsight.core.models import Transaction, Investment, Debt


def filter_by_period(
    transactions: Iterable[Transaction],
    view: str,
    reference: str,
) -> List[Transaction]:
    """
    Select the transactions that fall in the period being viewed.

    Dates are compared as ISO strings: the whole date for the daily view,
    the first 7 characters (YYYY-MM) for the monthly view and the first 4
    (YYYY) for the yearly view. No timezone handling is involved.

    Args:
        transactions: Transactions in insertion order
        view: "daily", "monthly" or "yearly"
        reference: Selected day (YYYY-MM-DD), month (YYYY-MM) or year (YYYY)

    Returns:
        Matching transactions, insertion order preserved
    """
    view = EView(view)
    if view is EView.DAILY:
        return [tx for tx in transactions if tx.date == reference]
    if view is EView.MONTHLY:
        key = reference[:7]
        return [tx for tx in transactions if tx.date[:7] == key]
    key = reference[:4]
    return [tx for tx in transactions if tx.date[:4] == key]


def aggregate_stats(transactions: Sequence[Transaction]) -> Dict[str, float]:
    """Income, expense, net and count over a set of transactions."""
    income = sum(tx.amount for tx in transactions if tx.type == ETransactionType.INCOME)
    expense = sum(tx.amount for tx in transactions if tx.type == ETransactionType.EXPENSE)
    return {
        "income": float(income),
        "expense": float(expense),
        "net": float(income - expense),
        "count": len(transactions),
    }


def category_breakdown(transactions: Iterable[Transaction]) -> List[Dict]:
    """
    Group transactions by category, largest total first.

    A category keeps the type of the first transaction seen with it. Colors
    are assigned by cycling PALETTE in first-seen order, so a category's
    color can shift when categories are added or removed.
    """
    groups: Dict[str, Dict] = {}
    for tx in transactions:
        group = groups.get(tx.category)
        if group is None:
            group = {"name": tx.category, "type": tx.type, "total": 0.0, "count": 0}
            groups[tx.category] = group
        group["total"] += tx.amount
        group["count"] += 1

    breakdown = []
    for i, group in enumerate(groups.values()):
        group["color"] = PALETTE[i % len(PALETTE)]
        breakdown.append(group)
    return sorted(breakdown, key=lambda g: g["total"], reverse=True)


def holding_stats(investment: Investment) -> Dict[str, float]:
    """Value, cost and gain of a single holding."""
    value = investment.value
    cost = investment.cost
    gain = value - cost
    return {
        "value": value,
        "cost": cost,
        "gain": gain,
        "gainPct": (gain / cost) * 100 if cost > 0 else 0.0,
    }


def portfolio_stats(investments: Iterable[Investment]) -> Dict[str, float]:
    """Total value, cost basis and gain across all holdings."""
    investments = list(investments)
    total_value = sum(inv.shares * inv.current_price for inv in investments)
    total_cost = sum(inv.shares * inv.purchase_price for inv in investments)
    total_gain = total_value - total_cost
    return {
        "totalValue": float(total_value),
        "totalCost": float(total_cost),
        "totalGain": float(total_gain),
        "gainPct": (total_gain / total_cost) * 100 if total_cost > 0 else 0.0,
    }


def allocation_by_type(investments: Iterable[Investment]) -> List[Dict]:
    """Portfolio value per investment type with its share of the total."""
    by_type: Dict[str, float] = {}
    for inv in investments:
        by_type[inv.type] = by_type.get(inv.type, 0.0) + inv.value
    total = sum(by_type.values())
    return [
        {
            "type": inv_type,
            "value": value,
            "pct": (value / total) * 100 if total > 0 else 0.0,
            "color": PALETTE[i % len(PALETTE)],
        }
        for i, (inv_type, value) in enumerate(by_type.items())
    ]


def debt_stats(debts: Iterable[Debt]) -> Dict[str, float]:
    """
    Totals across all debts.

    creditUsed is computed only over debts that have a credit limit, and is
    0 when none do.
    """
    debts = list(debts)
    limited = [d for d in debts if d.has_credit_limit]

    total_debt = sum(d.balance for d in debts)
    total_min_payment = sum(d.minimum_payment or 0 for d in debts)
    avg_rate = sum(d.interest_rate for d in debts) / len(debts) if debts else 0.0
    total_credit_limit = sum(d.credit_limit for d in limited)
    limited_balance = sum(d.balance for d in limited)
    credit_used = (limited_balance / total_credit_limit) * 100 if total_credit_limit > 0 else 0.0

    return {
        "totalDebt": float(total_debt),
        "totalMinPayment": float(total_min_payment),
        "avgRate": float(avg_rate),
        "totalCreditLimit": float(total_credit_limit),
        "creditUsed": float(credit_used),
    }


def credit_utilization(debt: Debt) -> Optional[float]:
    """Balance as a percentage of the credit limit, or None without a limit."""
    if not debt.has_credit_limit:
        return None
    return (debt.balance / debt.credit_limit) * 100


def net_worth(portfolio: Dict[str, float], debts: Dict[str, float]) -> float:
    """Portfolio value minus total debt."""
    return portfolio["totalValue"] - debts["totalDebt"]


def monthly_totals(transactions: Iterable[Transaction]) -> Dict[str, Dict[str, float]]:
    """
    Bucket every transaction by month.

    Returns:
        {"YYYY-MM": {"income": float, "expense": float}} in month order
    """
    buckets: Dict[str, Dict[str, float]] = {}
    for tx in transactions:
        key = tx.date[:7]
        bucket = buckets.setdefault(key, {"income": 0.0, "expense": 0.0})
        bucket[tx.type] += tx.amount
    return {key: buckets[key] for key in sorted(buckets)}


def daily_trend(transactions: Iterable[Transaction], view: str) -> List[float]:
    """
    Running net total by day of month for the monthly view.

    Produces 31 points regardless of the month's real length: days without
    transactions (including days past the end of a short month) repeat the
    previous cumulative value. Other views get an empty list.

    Args:
        transactions: Transactions already filtered to the selected month
        view: Current view
    """
    if EView(view) is not EView.MONTHLY:
        return []

    by_day: Dict[int, float] = {}
    for tx in transactions:
        day = int(tx.date[8:10])
        by_day[day] = by_day.get(day, 0.0) + tx.signed_amount

    trend = []
    cumulative = 0.0
    for day in range(1, DAYS_IN_TREND + 1):
        cumulative += by_day.get(day, 0.0)
        trend.append(cumulative)
    return trend


def category_monthly_averages(
    transactions: Iterable[Transaction],
    monthly: Dict[str, Dict[str, float]],
) -> List[Dict]:
    """
    Average monthly spend per expense category.

    Totals are divided by the number of months with any activity (at least 1).
    """
    month_count = max(len(monthly), 1)
    totals: Dict[str, float] = {}
    for tx in transactions:
        if tx.type != ETransactionType.EXPENSE:
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount

    entries = sorted(
        ({"name": name, "avg": total / month_count} for name, total in totals.items()),
        key=lambda e: e["avg"],
        reverse=True,
    )
    for i, entry in enumerate(entries):
        entry["color"] = PALETTE[i % len(PALETTE)]
    return entries
