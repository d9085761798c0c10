"""
Finsight Metrics Engine.

Pure functions that turn record collections into the statistics the
dashboard and the advisor consume.

Modules:
    metrics: Period filtering, aggregation, portfolio and debt statistics
    amortization: Debt payoff estimates and schedules
    projection: Rolling-average cash-flow forecasting
    snapshot: All of the above for one AppState
"""

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
from finsight.core.engine.amortization import (
    PayoffEstimate,
    estimate_payoff,
    estimate_debt_payoff,
    required_payment,
    payoff_schedule,
)
from finsight.core.engine.projection import rolling_averages, yearly_projection, projection_timeline
from finsight.core.engine.snapshot import build_snapshot

__all__ = [
    "filter_by_period",
    "aggregate_stats",
    "category_breakdown",
    "holding_stats",
    "portfolio_stats",
    "allocation_by_type",
    "debt_stats",
    "credit_utilization",
    "net_worth",
    "monthly_totals",
    "daily_trend",
    "category_monthly_averages",
    "PayoffEstimate",
    "estimate_payoff",
    "estimate_debt_payoff",
    "required_payment",
    "payoff_schedule",
    "rolling_averages",
    "yearly_projection",
    "projection_timeline",
    "build_snapshot",
]
