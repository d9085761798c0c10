"""
Helpers shared by the record CRUD routers.
"""

from typing import Any, Dict

from fastapi import HTTPException, status

from finsight.core.session import FinanceSession


def get_record_or_404(session: FinanceSession, document: str, record_id: str, label: str):
    record = session.state.find(document, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} {record_id} not found",
        )
    return record


def create_record(session: FinanceSession, document: str, noun: str, payload: Dict[str, Any]):
    """
    Dispatch an add action and return the new record.

    Raises:
        HTTPException: 422 if the reducer rejected the payload
    """
    before = session.state
    after = session.dispatch({"type": f"add_{noun}", "payload": payload})
    if after is before:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid {noun}",
        )
    return after.collection(document)[-1]


def update_record(session: FinanceSession, document: str, noun: str, record_id: str, payload: Dict[str, Any]):
    """
    Dispatch an update action and return the updated record.

    Raises:
        HTTPException: 404 if the record does not exist, 422 if the merged record is invalid
    """
    get_record_or_404(session, document, record_id, noun.capitalize())
    before = session.state
    after = session.dispatch({"type": f"update_{noun}", "id": record_id, "payload": payload})
    if after is before:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid {noun} update",
        )
    return after.find(document, record_id)


def delete_record(session: FinanceSession, document: str, noun: str, record_id: str) -> None:
    get_record_or_404(session, document, record_id, noun.capitalize())
    session.dispatch({"type": f"delete_{noun}", "id": record_id})
