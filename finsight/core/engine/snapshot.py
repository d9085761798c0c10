"""
Full metrics snapshot for one AppState.

Recomputed from scratch on every read; nothing here is cached or persisted.
"""

from datetime import date
from typing import Any, Dict, Optional

from finsight.core.engine.amortization import estimate_debt_payoff
from finsight.core.engine.metrics import (
    filter_by_period,
    aggregate_stats,
    category_breakdown,
    holding_stats,
    portfolio_stats,
    allocation_by_type,
    debt_stats,
    credit_utilization,
    net_worth,
    monthly_totals,
    daily_trend,
    category_monthly_averages,
)
from finsight.core.engine.projection import yearly_projection, projection_timeline
from finsight.utils.date_utils import today_iso, month_key


def build_snapshot(state, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Every derived view of a state.

    Args:
        state: AppState to summarize
        today: Reference day for the projection timeline (defaults to today)

    Returns:
        Dictionary with stats, categories, dailyTrend, portfolio, holdings,
        allocation, debts, debtDetails, netWorth, monthly, yearlyProjection,
        timeline and categoryAverages
    """
    filtered = filter_by_period(state.transactions, state.view, state.reference)
    monthly = monthly_totals(state.transactions)
    portfolio = portfolio_stats(state.investments)
    debts = debt_stats(state.debts)

    return {
        "view": state.view,
        "reference": state.reference,
        "stats": aggregate_stats(filtered),
        "categories": category_breakdown(filtered),
        "dailyTrend": daily_trend(filtered, state.view),
        "portfolio": portfolio,
        "holdings": [
            {"id": inv.id, "name": inv.name, "type": inv.type, **holding_stats(inv)}
            for inv in state.investments
        ],
        "allocation": allocation_by_type(state.investments),
        "debts": debts,
        "debtDetails": [
            {
                "id": debt.id,
                "name": debt.name,
                "type": debt.type,
                "balance": debt.balance,
                "utilization": credit_utilization(debt),
                "payoff": estimate_debt_payoff(debt).to_dict(),
            }
            for debt in state.debts
        ],
        "netWorth": net_worth(portfolio, debts),
        "monthly": monthly,
        "yearlyProjection": yearly_projection(monthly),
        "timeline": projection_timeline(monthly, month_key(today_iso(today))),
        "categoryAverages": category_monthly_averages(state.transactions, monthly),
    }
