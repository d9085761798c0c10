"""
Debt CRUD API endpoints.

Provides REST API for managing the user's debts.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from finsight.api.dependencies import get_finance_session
from finsight.api.routes.common import create_record, delete_record, get_record_or_404, update_record
from finsight.api.schemas import DebtCreate, DebtUpdate, DebtResponse
from finsight.core.constants import EDocument
from finsight.core.session import FinanceSession


router = APIRouter()


@router.post("/", response_model=DebtResponse, status_code=status.HTTP_201_CREATED)
async def create_debt(
    debt: DebtCreate,
    session: FinanceSession = Depends(get_finance_session),
):
    record = create_record(session, EDocument.DEBTS, "debt", debt.to_payload())
    return record.to_dict()


@router.get("/", response_model=List[DebtResponse])
async def list_debts(
    debt_type: str = None,
    session: FinanceSession = Depends(get_finance_session),
):
    debts = session.state.debts
    if debt_type:
        debts = [debt for debt in debts if debt.type == debt_type]
    return [debt.to_dict() for debt in debts]


@router.get("/{debt_id}", response_model=DebtResponse)
async def get_debt(
    debt_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    return get_record_or_404(session, EDocument.DEBTS, debt_id, "Debt").to_dict()


@router.put("/{debt_id}", response_model=DebtResponse)
async def update_debt(
    debt_id: str,
    debt_update: DebtUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    return update_record(session, EDocument.DEBTS, "debt", debt_id, debt_update.to_payload()).to_dict()


@router.delete("/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_debt(
    debt_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    delete_record(session, EDocument.DEBTS, "debt", debt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
