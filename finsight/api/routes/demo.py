"""
Demo mode endpoints for Finsight.

Provides reset and status endpoints for the demo user showcase.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from finsight.api.auth import get_current_user, is_demo_user
from finsight.api.dependencies import get_finance_session
from finsight.core.session import FinanceSession
from finsight.db.models import User

router = APIRouter()


@router.get("/status")
async def demo_status(user: User = Depends(get_current_user)):
    """Return whether the current session is in demo mode."""
    return {"is_demo": is_demo_user(user)}


@router.post("/reset")
async def reset_demo(
    user: User = Depends(get_current_user),
    session: FinanceSession = Depends(get_finance_session),
):
    """Restore the sample data set. Only works for the demo user."""
    if not is_demo_user(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Reset is only available for the demo user.",
        )

    session.reset_to_sample()
    return {"status": "ok", "message": "Demo data has been reset."}
