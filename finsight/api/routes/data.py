"""
Bulk data API endpoints.

Export and import the backup file, clear every collection, or reset to the
sample data set.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from finsight.api.dependencies import get_finance_session
from finsight.api.schemas import DataResetResponse, ExportResponse, ImportResponse
from finsight.core.backup import export_backup
from finsight.core.constants import COLLECTION_DOCUMENTS
from finsight.core.session import FinanceSession
from finsight.utils.error_utils import DataFormatError, RecordStoreError

logger = logging.getLogger("finsight")

router = APIRouter()


def _counts(session: FinanceSession) -> dict:
    return {name: len(session.state.collection(name)) for name in COLLECTION_DOCUMENTS}


@router.get("/export", response_model=ExportResponse)
async def export_data(session: FinanceSession = Depends(get_finance_session)):
    """Backup file with every collection; pending writes are flushed first."""
    await session.flush()
    return export_backup(session.state)


@router.post("/import", response_model=ImportResponse)
async def import_data(
    data: Any = Body(..., description="Backup object, or a bare array of transactions"),
    session: FinanceSession = Depends(get_finance_session),
):
    """
    Overwrite the collections present in a backup file.

    Either every provided collection is written or none is.
    """
    try:
        imported = await session.import_backup(data)
    except DataFormatError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except RecordStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    logger.info(f"Imported {', '.join(imported)} for user {session.user_id}")
    return {"imported": imported, "counts": _counts(session)}


@router.post("/clear", response_model=DataResetResponse)
async def clear_data(session: FinanceSession = Depends(get_finance_session)):
    """Empty every collection."""
    session.clear_all()
    return {"status": "ok", "counts": _counts(session)}


@router.post("/reset", response_model=DataResetResponse)
async def reset_data(session: FinanceSession = Depends(get_finance_session)):
    """Replace every collection with the sample data set."""
    session.reset_to_sample()
    return {"status": "ok", "counts": _counts(session)}
