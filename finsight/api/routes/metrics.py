"""
Metrics API endpoints.

Every response is recomputed from the session's in-memory state.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from finsight.api.dependencies import get_finance_session
from finsight.api.routes.common import get_record_or_404
from finsight.api.schemas import (
    DebtMetricsResponse,
    PortfolioMetricsResponse,
    PayoffScheduleResponse,
    SyncStatusResponse,
)
from finsight.core.constants import EDocument
from finsight.core.engine import (
    build_snapshot,
    estimate_debt_payoff,
    payoff_schedule,
    required_payment,
    rolling_averages,
)
from finsight.core.session import FinanceSession


router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(session: FinanceSession = Depends(get_finance_session)) -> Dict[str, Any]:
    """Complete metrics snapshot for the current view and period."""
    return build_snapshot(session.state)


@router.get("/portfolio", response_model=PortfolioMetricsResponse)
async def get_portfolio_metrics(session: FinanceSession = Depends(get_finance_session)):
    snapshot = build_snapshot(session.state)
    return {
        "stats": snapshot["portfolio"],
        "holdings": snapshot["holdings"],
        "allocation": snapshot["allocation"],
    }


@router.get("/debts", response_model=DebtMetricsResponse)
async def get_debt_metrics(session: FinanceSession = Depends(get_finance_session)):
    snapshot = build_snapshot(session.state)
    return {"stats": snapshot["debts"], "debts": snapshot["debtDetails"]}


@router.get("/projections")
async def get_projections(session: FinanceSession = Depends(get_finance_session)) -> Dict[str, Any]:
    """Monthly totals, rolling averages, annual projection and the 12-month timeline."""
    snapshot = build_snapshot(session.state)
    return {
        "monthly": snapshot["monthly"],
        "rolling": rolling_averages(snapshot["monthly"]),
        "yearlyProjection": snapshot["yearlyProjection"],
        "timeline": snapshot["timeline"],
        "categoryAverages": snapshot["categoryAverages"],
    }


@router.get("/payoff/{debt_id}/schedule", response_model=PayoffScheduleResponse)
async def get_payoff_schedule(
    debt_id: str,
    target_months: Optional[int] = Query(None, gt=0, le=1200, description="Also compute the payment for this term"),
    session: FinanceSession = Depends(get_finance_session),
):
    """
    Month-by-month payoff of one debt at its minimum payment.

    The schedule is empty when the minimum payment never retires the balance.
    """
    debt = get_record_or_404(session, EDocument.DEBTS, debt_id, "Debt")
    df = payoff_schedule(debt)

    rows = [
        {
            "month": int(row.month),
            "payment": float(row.payment),
            "interest": float(row.interest),
            "principal": float(row.principal),
            "balance": float(row.balance),
            "totalInterest": float(row.total_interest),
        }
        for row in df.itertuples(index=False)
    ]
    response = {"debtId": debt.id, "payoff": estimate_debt_payoff(debt).to_dict(), "schedule": rows}

    if target_months is not None:
        try:
            response["requiredPayment"] = required_payment(debt.balance, debt.interest_rate, target_months)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return response


@router.get("/sync", response_model=SyncStatusResponse)
async def get_sync_status(session: FinanceSession = Depends(get_finance_session)):
    return session.status()
