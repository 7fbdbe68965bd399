"""Coach persistence: daily advice cache, chat history, quiz results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.coach.client import ChatTurn, CoachClient
from moneyglow.config import get_settings
from moneyglow.database import dialect_insert
from moneyglow.db.models import ChatMessage, DailyAdvice, User
from moneyglow.gamification.levels import XPAction
from moneyglow.gamification.streak_service import StreakResult, update_streak
from moneyglow.gamification.xp_service import award_xp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdviceResult:
    content: str | None
    cached: bool
    xp_awarded: int = 0
    streak: StreakResult | None = None


# ---------------------------------------------------------------------------
# Daily advice
# ---------------------------------------------------------------------------


async def get_cached_advice(db: AsyncSession, user_id: str, day: date) -> str | None:
    result = await db.execute(
        select(DailyAdvice.content).where(DailyAdvice.user_id == user_id, DailyAdvice.date == day)
    )
    return result.scalar_one_or_none()


async def get_or_generate_advice(
    db: AsyncSession,
    coach: CoachClient,
    user: User,
    day: date,
    now: datetime | None = None,
) -> AdviceResult:
    """Today's tip, generating it on the first request of the day.

    Only the request that stores the tip earns GET_DAILY_ADVICE XP and
    counts as the day's check-in.
    """
    cached = await get_cached_advice(db, user.id, day)
    if cached is not None:
        return AdviceResult(content=cached, cached=True)

    content = await coach.daily_advice(user, day)

    insert = dialect_insert(db)
    stored = await db.execute(
        insert(DailyAdvice)
        .values(user_id=user.id, content=content, date=day)
        .on_conflict_do_nothing(index_elements=["user_id", "date"])
    )
    if not stored.rowcount:
        # Another request stored today's tip first.
        existing = await get_cached_advice(db, user.id, day)
        return AdviceResult(content=existing, cached=True)

    award = await award_xp(db, user.id, XPAction.GET_DAILY_ADVICE)
    streak = await update_streak(db, user.id, now)
    return AdviceResult(content=content, cached=False, xp_awarded=award.xp_awarded, streak=streak)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


async def load_history(db: AsyncSession, user_id: str, limit: int | None = None) -> list[ChatTurn]:
    """Most recent turns, oldest first, in Messages API shape."""
    limit = limit or get_settings().coach_history_limit
    result = await db.execute(
        select(ChatMessage.role, ChatMessage.content)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
    )
    rows = list(result.all())
    rows.reverse()
    return [{"role": role.lower(), "content": content} for role, content in rows]


async def save_message(db: AsyncSession, user_id: str, role: str, content: str) -> ChatMessage:
    message = ChatMessage(user_id=user_id, role=role, content=content, created_at=datetime.now(timezone.utc))
    db.add(message)
    await db.flush()
    return message


async def prune_history(db: AsyncSession, user_id: str, keep: int | None = None) -> int:
    """Delete all but the newest ``keep`` messages. Returns rows deleted."""
    keep = keep or get_settings().coach_history_limit
    stale = (
        select(ChatMessage.id)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .offset(keep)
    )
    stale_ids = list((await db.execute(stale)).scalars().all())
    if not stale_ids:
        return 0
    await db.execute(delete(ChatMessage).where(ChatMessage.id.in_(stale_ids)))
    return len(stale_ids)


# ---------------------------------------------------------------------------
# Quiz
# ---------------------------------------------------------------------------


async def submit_quiz_result(db: AsyncSession, coach: CoachClient, user: User, quiz_result: str) -> tuple[str, int]:
    """Store the money personality with a fresh 30-day challenge. Returns (challenge, xp_awarded)."""
    challenge = await coach.quiz_challenge(user, quiz_result)
    await db.execute(
        update(User).where(User.id == user.id).values(quiz_result=quiz_result, quiz_challenge=challenge)
    )
    award = await award_xp(db, user.id, XPAction.COMPLETE_QUIZ)
    logger.info("quiz_completed user=%s result=%s", user.id, quiz_result)
    return challenge, award.xp_awarded
