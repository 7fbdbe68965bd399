"""Glow score: a 0-100 read on how consistently a user manages their money.

Four capped components, computed over the trailing 30 days:

    tracking     income entries logged           1 pt each, max 30
    budget       budget saves                    5 pts each, max 20
    streak       current check-in streak         3.5 pts/day, max 25
    engagement   lifetime XP                     1 pt per 24 XP, max 25
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.db.models import User
from moneyglow.errors import UserNotFound
from moneyglow.gamification.counters import count_budget_saves_since, count_income_entries_since

GLOW_WINDOW_DAYS = 30

TRACKING_CAP = 30
BUDGET_CAP = 20
STREAK_CAP = 25
ENGAGEMENT_CAP = 25


@dataclass(frozen=True)
class GlowBreakdown:
    tracking: int
    budget: int
    streak: int
    engagement: int

    @property
    def total(self) -> int:
        return self.tracking + self.budget + self.streak + self.engagement


@dataclass(frozen=True)
class GlowLabel:
    label: str
    emoji: str
    min_score: int


GLOW_LABELS: tuple[GlowLabel, ...] = (
    GlowLabel(label="Needs TLC", emoji="🕯️", min_score=0),
    GlowLabel(label="Flickering", emoji="🔥", min_score=40),
    GlowLabel(label="Glowing", emoji="✨", min_score=60),
    GlowLabel(label="On Fire", emoji="💎", min_score=80),
)


def round_half_up(value: float) -> int:
    """Round .5 up, the way the web client rounds (2.5 -> 3, not 2)."""
    return math.floor(value + 0.5)


def glow_components(
    income_entries_30d: int,
    budget_saves_30d: int,
    streak_count: int,
    xp: int,
) -> GlowBreakdown:
    return GlowBreakdown(
        tracking=min(income_entries_30d, TRACKING_CAP),
        budget=min(budget_saves_30d * 5, BUDGET_CAP),
        streak=min(round_half_up(streak_count * 3.5), STREAK_CAP),
        engagement=min(round_half_up(xp / 24), ENGAGEMENT_CAP),
    )


def get_glow_label(score: int) -> GlowLabel:
    current = GLOW_LABELS[0]
    for label in GLOW_LABELS:
        if score >= label.min_score:
            current = label
    return current


async def get_glow_breakdown(db: AsyncSession, user_id: str, now: datetime | None = None) -> GlowBreakdown:
    """Component scores for ``user_id`` as of ``now``.

    Raises:
        UserNotFound: No such user.
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=GLOW_WINDOW_DAYS)

    result = await db.execute(select(User.streak_count, User.xp).where(User.id == user_id))
    row = result.one_or_none()
    if row is None:
        raise UserNotFound
    streak_count, xp = row

    income_30d = await count_income_entries_since(db, user_id, since)
    budgets_30d = await count_budget_saves_since(db, user_id, since)
    return glow_components(income_30d, budgets_30d, streak_count, xp)


async def calculate_glow_score(db: AsyncSession, user_id: str, now: datetime | None = None) -> int:
    """Total glow score (0-100)."""
    breakdown = await get_glow_breakdown(db, user_id, now)
    return breakdown.total
