"""
Investment CRUD API endpoints.

Provides REST API for managing the user's portfolio holdings.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from finsight.api.dependencies import get_finance_session
from finsight.api.routes.common import create_record, delete_record, get_record_or_404, update_record
from finsight.api.schemas import InvestmentCreate, InvestmentUpdate, InvestmentResponse
from finsight.core.constants import EDocument
from finsight.core.session import FinanceSession


router = APIRouter()


@router.post("/", response_model=InvestmentResponse, status_code=status.HTTP_201_CREATED)
async def create_investment(
    investment: InvestmentCreate,
    session: FinanceSession = Depends(get_finance_session),
):
    record = create_record(session, EDocument.INVESTMENTS, "investment", investment.to_payload())
    return record.to_dict()


@router.get("/", response_model=List[InvestmentResponse])
async def list_investments(
    investment_type: str = None,
    session: FinanceSession = Depends(get_finance_session),
):
    investments = session.state.investments
    if investment_type:
        investments = [inv for inv in investments if inv.type == investment_type]
    return [inv.to_dict() for inv in investments]


@router.get("/{investment_id}", response_model=InvestmentResponse)
async def get_investment(
    investment_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    return get_record_or_404(session, EDocument.INVESTMENTS, investment_id, "Investment").to_dict()


@router.put("/{investment_id}", response_model=InvestmentResponse)
async def update_investment(
    investment_id: str,
    investment_update: InvestmentUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    record = update_record(
        session, EDocument.INVESTMENTS, "investment", investment_id, investment_update.to_payload()
    )
    return record.to_dict()


@router.delete("/{investment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_investment(
    investment_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    delete_record(session, EDocument.INVESTMENTS, "investment", investment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
