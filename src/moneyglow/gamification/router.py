"""Gamification endpoints: stats, badges, level table."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.dependencies import get_current_user
from moneyglow.db.models import User
from moneyglow.dependencies import get_db
from moneyglow.gamification.badges import compute_badges
from moneyglow.gamification.glow import get_glow_breakdown, get_glow_label
from moneyglow.gamification.levels import LEVELS, calculate_level, get_next_level
from moneyglow.gamification.schemas import (
    AllLevelsResponse,
    BadgeResponse,
    GlowBreakdownResponse,
    LevelEntry,
    NextLevelResponse,
    UserBadgesResponse,
    UserStatsResponse,
)

router = APIRouter(prefix="/api", tags=["Gamification"])


@router.get("/user/stats", response_model=UserStatsResponse)
async def get_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserStatsResponse:
    """XP, level progress, streaks and glow score for the signed-in user."""
    level = calculate_level(user.xp)
    next_level = get_next_level(user.xp)
    breakdown = await get_glow_breakdown(db, user.id)
    label = get_glow_label(breakdown.total)

    return UserStatsResponse(
        xp=user.xp,
        level=level.level,
        level_name=level.name,
        level_emoji=level.emoji,
        next_level=NextLevelResponse(**asdict(next_level)) if next_level else None,
        streak_count=user.streak_count,
        longest_streak=user.longest_streak,
        glow_score=breakdown.total,
        glow_label=label.label,
        glow_emoji=label.emoji,
        glow_breakdown=GlowBreakdownResponse(
            tracking=breakdown.tracking,
            budget=breakdown.budget,
            streak=breakdown.streak,
            engagement=breakdown.engagement,
        ),
    )


@router.get("/user/badges", response_model=UserBadgesResponse)
async def get_badges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserBadgesResponse:
    badges = await compute_badges(db, user.id)
    return UserBadgesResponse(
        badges=[BadgeResponse(**asdict(b)) for b in badges],
        earned_count=sum(1 for b in badges if b.earned),
        total_count=len(badges),
    )


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels() -> AllLevelsResponse:
    """The level ladder. Public."""
    return AllLevelsResponse(levels=[LevelEntry(**asdict(tier)) for tier in LEVELS])
