"""
Transaction CRUD API endpoints.

Provides REST API for managing the user's income and expense records.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from finsight.api.dependencies import get_finance_session
from finsight.api.routes.common import create_record, delete_record, get_record_or_404, update_record
from finsight.api.schemas import TransactionCreate, TransactionUpdate, TransactionResponse, View
from finsight.core.constants import EDocument
from finsight.core.engine import filter_by_period
from finsight.core.session import FinanceSession


router = APIRouter()


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    session: FinanceSession = Depends(get_finance_session),
):
    record = create_record(session, EDocument.TRANSACTIONS, "transaction", transaction.to_payload())
    return record.to_dict()


@router.get("/", response_model=List[TransactionResponse])
async def list_transactions(
    view: Optional[View] = None,
    reference: Optional[str] = None,
    session: FinanceSession = Depends(get_finance_session),
):
    """
    List transactions in insertion order.

    With ``view`` the list is restricted to one period; ``reference``
    defaults to the selected day, month or year for that view.
    """
    transactions = session.state.transactions
    if view is not None:
        state = session.state.replace(view=view.value)
        if reference is None:
            reference = state.reference
        transactions = filter_by_period(transactions, view.value, reference)
    elif reference is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="reference requires view",
        )
    return [tx.to_dict() for tx in transactions]


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    return get_record_or_404(session, EDocument.TRANSACTIONS, transaction_id, "Transaction").to_dict()


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    record = update_record(
        session, EDocument.TRANSACTIONS, "transaction", transaction_id, transaction_update.to_payload()
    )
    return record.to_dict()


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    session: FinanceSession = Depends(get_finance_session),
):
    delete_record(session, EDocument.TRANSACTIONS, "transaction", transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
