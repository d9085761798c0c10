"""
AI advisor API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from finsight.advisor import AdvisorService, QUICK_PROMPTS
from finsight.api.dependencies import get_advisor_service, get_finance_session
from finsight.api.schemas import ChatRequest, ChatResponse, QuickPrompt
from finsight.core.engine import build_snapshot
from finsight.core.session import FinanceSession
from finsight.utils.error_utils import AdvisorError


router = APIRouter()


@router.get("/prompts", response_model=List[QuickPrompt])
async def list_quick_prompts():
    return QUICK_PROMPTS


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    x_gemini_key: Optional[str] = Header(None),
    session: FinanceSession = Depends(get_finance_session),
    advisor: AdvisorService = Depends(get_advisor_service),
):
    """
    Ask the advisor about the user's finances.

    The key from the X-Gemini-Key header takes precedence over GEMINI_API_KEY.
    """
    state = session.state
    messages = [message.model_dump() for message in request.messages]

    try:
        reply = await run_in_threadpool(
            advisor.chat,
            messages,
            build_snapshot(state),
            state,
            lang=request.lang,
            currency=request.currency,
            api_key=x_gemini_key,
        )
    except AdvisorError as e:
        # No attempt means nothing was sent: the key is missing
        code = status.HTTP_502_BAD_GATEWAY if e.attempts else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=e.message)

    return {"reply": reply}
