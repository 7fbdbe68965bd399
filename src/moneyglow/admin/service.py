"""Admin reporting queries and feedback storage."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from moneyglow.db.models import ChatMessage, DailyAdvice, Expense, Feedback, IncomeEntry, MonthlyBudget, User
from moneyglow.gamification.glow import round_half_up
from moneyglow.gamification.levels import LEVELS

ACTIVE_WINDOW_DAYS = 7
FEEDBACK_PAGE_SIZE = 50
MAX_USER_PAGE_SIZE = 50


async def _scalar(db: AsyncSession, stmt) -> int | float:  # noqa: ANN001
    return (await db.execute(stmt)).scalar_one() or 0


async def platform_stats(db: AsyncSession, now: datetime | None = None) -> dict[str, object]:
    now = now or datetime.now(timezone.utc)
    active_since = now - timedelta(days=ACTIVE_WINDOW_DAYS)

    total_users = await _scalar(db, select(func.count(User.id)))
    onboarded = await _scalar(db, select(func.count(User.id)).where(User.onboarded.is_(True)))
    active = await _scalar(db, select(func.count(User.id)).where(User.last_check_in >= active_since))
    total_income = await _scalar(db, select(func.coalesce(func.sum(IncomeEntry.amount), 0)))
    total_expenses = await _scalar(db, select(func.coalesce(func.sum(Expense.amount), 0)))
    total_budgets = await _scalar(db, select(func.count(MonthlyBudget.id)))
    quiz_done = await _scalar(
        db, select(func.count(User.id)).where(User.onboarded.is_(True), User.quiz_result.is_not(None))
    )

    levels = {tier.level: 0 for tier in LEVELS}
    rows = await db.execute(select(User.level, func.count(User.id)).group_by(User.level))
    for level, count in rows.all():
        levels[level] = count

    return {
        "total_users": total_users,
        "onboarded_users": onboarded,
        "active_users": active,
        "total_income": float(total_income),
        "total_expenses": float(total_expenses),
        "total_budgets": total_budgets,
        "quiz_completion_rate": round_half_up(quiz_done / onboarded * 100) if onboarded else 0,
        "level_distribution": levels,
    }


async def search_users(db: AsyncSession, search: str, page: int, limit: int) -> tuple[list[User], int]:
    """Newest first, optionally filtered by a case-insensitive email/name substring."""
    limit = max(1, min(limit, MAX_USER_PAGE_SIZE))
    page = max(1, page)
    stmt = select(User)
    count_stmt = select(func.count(User.id))
    if search:
        pattern = f"%{search.lower()}%"
        where = or_(func.lower(User.email).like(pattern), func.lower(User.name).like(pattern))
        stmt = stmt.where(where)
        count_stmt = count_stmt.where(where)

    result = await db.execute(stmt.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit))
    total = await _scalar(db, count_stmt)
    return list(result.scalars().all()), int(total)


async def activity_counts(db: AsyncSession, user_id: str) -> dict[str, int]:
    counts = {}
    for key, column, owner in (
        ("income_entries", IncomeEntry.id, IncomeEntry.user_id),
        ("expenses", Expense.id, Expense.user_id),
        ("monthly_budgets", MonthlyBudget.id, MonthlyBudget.user_id),
        ("chat_messages", ChatMessage.id, ChatMessage.user_id),
        ("daily_advice", DailyAdvice.id, DailyAdvice.user_id),
    ):
        counts[key] = int(await _scalar(db, select(func.count(column)).where(owner == user_id)))
    return counts


async def add_feedback(
    db: AsyncSession,
    user_id: str,
    rating: int,
    reason: str | None,
    context: str | None,
    page: str | None,
) -> Feedback:
    feedback = Feedback(
        user_id=user_id,
        rating=rating,
        reason=reason or None,
        context=context or None,
        page=page or None,
    )
    db.add(feedback)
    await db.flush()
    return feedback


async def list_feedback(db: AsyncSession, page: int) -> dict[str, object]:
    page = max(1, page)
    result = await db.execute(
        select(Feedback)
        .options(selectinload(Feedback.user))
        .order_by(Feedback.created_at.desc())
        .offset((page - 1) * FEEDBACK_PAGE_SIZE)
        .limit(FEEDBACK_PAGE_SIZE)
    )
    items = list(result.scalars().all())
    total = int(await _scalar(db, select(func.count(Feedback.id))))

    stats = {"positive": 0, "neutral": 0, "negative": 0}
    names = {1: "positive", 0: "neutral", -1: "negative"}
    rows = await db.execute(select(Feedback.rating, func.count(Feedback.id)).group_by(Feedback.rating))
    for rating, count in rows.all():
        if rating in names:
            stats[names[rating]] = count

    return {
        "feedback": [
            {
                "id": f.id,
                "rating": f.rating,
                "reason": f.reason,
                "context": f.context,
                "page": f.page,
                "created_at": f.created_at,
                "user": {"email": f.user.email, "name": f.user.name},
            }
            for f in items
        ],
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / FEEDBACK_PAGE_SIZE),
        "stats": stats,
    }
