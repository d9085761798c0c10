"""
FastAPI dependencies shared by the routers.

Finance sessions are cached per user in a process-wide registry. Tests
override ``get_session_registry`` (and ``get_advisor_service``) through
``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status

from finsight.advisor import AdvisorService
from finsight.api.auth import get_current_user
from finsight.core.session import FinanceSession, FinanceSessionRegistry
from finsight.db.models import User
from finsight.db.record_store import SqlRecordStore
from finsight.utils.error_utils import RecordStoreError

_registry: Optional[FinanceSessionRegistry] = None
_advisor: Optional[AdvisorService] = None


def get_session_registry() -> FinanceSessionRegistry:
    """Get or create the process-wide session registry."""
    global _registry
    if _registry is None:
        _registry = FinanceSessionRegistry(SqlRecordStore)
    return _registry


def get_advisor_service() -> AdvisorService:
    global _advisor
    if _advisor is None:
        _advisor = AdvisorService()
    return _advisor


async def get_finance_session(
    current_user: User = Depends(get_current_user),
    registry: FinanceSessionRegistry = Depends(get_session_registry),
) -> FinanceSession:
    """
    The current user's open finance session.

    Raises:
        HTTPException: 503 if the user's documents cannot be loaded
    """
    try:
        return await registry.get(current_user.id)
    except RecordStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not load your data: {e.message}",
        )
