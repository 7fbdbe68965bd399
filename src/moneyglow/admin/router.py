"""Feedback submission and the admin dashboard API."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.admin import service
from moneyglow.admin.schemas import (
    ActivityCounts,
    AdminFeedbackList,
    AdminStatsResponse,
    AdminUserDetail,
    AdminUserList,
    AdminUserRow,
    FeedbackCreate,
    FeedbackSaved,
)
from moneyglow.auth.dependencies import get_current_user, require_admin
from moneyglow.auth.schemas import ProfileResponse
from moneyglow.auth.service import get_user_by_id
from moneyglow.db.models import User
from moneyglow.dependencies import get_db
from moneyglow.errors import UserNotFound
from moneyglow.gamification.badges import compute_badges
from moneyglow.gamification.glow import calculate_glow_score
from moneyglow.gamification.schemas import BadgeResponse

feedback_router = APIRouter(prefix="/api", tags=["Feedback"])
router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@feedback_router.post("/feedback", response_model=FeedbackSaved)
async def submit_feedback(
    body: FeedbackCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FeedbackSaved:
    await service.add_feedback(db, user.id, body.rating, body.reason, body.context, body.page)
    await db.commit()
    return FeedbackSaved()


@router.get("/stats", response_model=AdminStatsResponse)
async def stats(db: AsyncSession = Depends(get_db)) -> AdminStatsResponse:
    return AdminStatsResponse.model_validate(await service.platform_stats(db))


@router.get("/users", response_model=AdminUserList)
async def list_users(
    search: str = Query(default="", max_length=320),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1),
    db: AsyncSession = Depends(get_db),
) -> AdminUserList:
    """Paged user search. ``limit`` is capped at 50."""
    users, total = await service.search_users(db, search, page, limit)
    return AdminUserList(
        users=[AdminUserRow.model_validate(u) for u in users],
        total=total,
        page=page,
        limit=min(limit, service.MAX_USER_PAGE_SIZE),
    )


@router.get("/users/{user_id}", response_model=AdminUserDetail)
async def user_detail(user_id: str, db: AsyncSession = Depends(get_db)) -> AdminUserDetail:
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFound
    counts = await service.activity_counts(db, user_id)
    glow_score = await calculate_glow_score(db, user_id)
    badges = await compute_badges(db, user_id)
    return AdminUserDetail(
        user=ProfileResponse.model_validate(user),
        counts=ActivityCounts(**counts),
        glow_score=glow_score,
        badges=[BadgeResponse(**asdict(b)) for b in badges],
    )


@router.get("/feedback", response_model=AdminFeedbackList)
async def list_feedback(
    page: int = Query(default=1, ge=1),
    db: AsyncSession = Depends(get_db),
) -> AdminFeedbackList:
    return AdminFeedbackList.model_validate(await service.list_feedback(db, page))
