"""
Settings API endpoints.

View granularity and the active tab are persisted; the selected day, month
and year live only in the session.
"""

from fastapi import APIRouter, Depends

from finsight.api.dependencies import get_finance_session
from finsight.api.schemas import SettingsUpdate, SettingsResponse
from finsight.core.session import FinanceSession


router = APIRouter()


def _settings_response(session: FinanceSession) -> dict:
    state = session.state
    return {
        "view": state.view,
        "activeTab": state.active_tab,
        "selectedDate": state.selected_date,
        "selectedMonth": state.selected_month,
        "selectedYear": state.selected_year,
        "reference": state.reference,
        "syncStatus": session.sync_status,
    }


@router.get("/", response_model=SettingsResponse)
async def get_settings(session: FinanceSession = Depends(get_finance_session)):
    return _settings_response(session)


@router.put("/", response_model=SettingsResponse)
async def update_settings(
    settings_update: SettingsUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    changes = settings_update.to_payload()

    if changes.get("view"):
        session.dispatch({"type": "set_view", "view": changes["view"]})
    if changes.get("activeTab"):
        session.dispatch({"type": "set_tab", "tab": changes["activeTab"]})

    period = {
        "date": changes.get("selectedDate"),
        "month": changes.get("selectedMonth"),
        "year": changes.get("selectedYear"),
    }
    if any(period.values()):
        session.dispatch({"type": "select_period", **period})

    return _settings_response(session)
