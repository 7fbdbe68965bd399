"""AI coach endpoints: daily advice, streaming chat, quiz result."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from datetime import datetime, timezone

import anthropic
import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.dependencies import get_current_user
from moneyglow.coach import service
from moneyglow.coach.client import ChatTurn, CoachClient
from moneyglow.coach.dependencies import get_coach
from moneyglow.coach.schemas import AdviceResponse, ChatRequest, QuizResultRequest, QuizResultResponse
from moneyglow.database import get_session
from moneyglow.db.models import User
from moneyglow.dependencies import get_db
from moneyglow.gamification.streak_service import local_day

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Coach"])


def _sse(payload: object) -> str:
    data = payload if isinstance(payload, str) else json.dumps(payload)
    return f"data: {data}\n\n"


@router.get("/advice", response_model=AdviceResponse)
async def get_advice(
    request: Request,
    peek: bool = Query(default=False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AdviceResponse:
    """Today's tip. ``peek`` only reads the cache and never calls the coach."""
    now = datetime.now(timezone.utc)
    today = local_day(now)

    cached = await service.get_cached_advice(db, user.id, today)
    if cached is not None or peek:
        return AdviceResponse(advice=cached, cached=cached is not None)

    coach = get_coach(request)
    result = await service.get_or_generate_advice(db, coach, user, today, now)
    await db.commit()
    return AdviceResponse(
        advice=result.content,
        cached=result.cached,
        xp_awarded=result.xp_awarded,
        streak_count=result.streak.streak_count if result.streak else None,
    )


async def _chat_events(
    coach: CoachClient,
    user: User,
    history: list[ChatTurn],
    message: str,
) -> AsyncIterator[str]:
    """SSE body: text chunks, then ``[DONE]``. The reply is stored once complete."""
    chunks: list[str] = []
    try:
        async for text in coach.stream_chat(user, history, message):
            chunks.append(text)
            yield _sse({"text": text})
    except anthropic.APIError as exc:
        logger.error("coach_chat_stream_failed", user_id=user.id, error=str(exc))
        yield _sse({"error": "Stream error"})
        return

    # The request-scoped session is gone once streaming starts.
    async for db in get_session():
        await service.save_message(db, user.id, "ASSISTANT", "".join(chunks))
        await service.prune_history(db, user.id)
        await db.commit()
        break
    yield _sse("[DONE]")


@router.post("/chat")
async def chat(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    coach: CoachClient = Depends(get_coach),
) -> StreamingResponse:
    """Stream a coach reply as server-sent events."""
    history = await service.load_history(db, user.id)
    await service.save_message(db, user.id, "USER", body.message)
    await db.commit()

    return StreamingResponse(
        _chat_events(coach, user, history, body.message),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.post("/quiz/result", response_model=QuizResultResponse)
async def quiz_result(
    body: QuizResultRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    coach: CoachClient = Depends(get_coach),
) -> QuizResultResponse:
    """Save the money personality and generate the matching 30-day challenge."""
    challenge, xp_awarded = await service.submit_quiz_result(db, coach, user, body.result.value)
    await db.commit()
    return QuizResultResponse(result=body.result, challenge=challenge, xp_awarded=xp_awarded)
