"""Level table and XP-to-level computation.

These values MUST match the web app's level badge and progress bar.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class LevelInfo:
    level: int
    name: str
    emoji: str
    min_xp: int


@dataclass(frozen=True)
class NextLevelInfo:
    level: int
    name: str
    emoji: str
    min_xp: int
    xp_needed: int
    progress: float


LEVELS: tuple[LevelInfo, ...] = (
    LevelInfo(level=1, name="Newbie", emoji="🌱", min_xp=0),
    LevelInfo(level=2, name="Rising Star", emoji="⭐", min_xp=100),
    LevelInfo(level=3, name="Pro Creator", emoji="🚀", min_xp=300),
    LevelInfo(level=4, name="Money Master", emoji="👑", min_xp=600),
)

MAX_LEVEL = LEVELS[-1].level


class XPAction(str, enum.Enum):
    """Actions that earn XP."""

    LOG_INCOME = "LOG_INCOME"
    SAVE_BUDGET = "SAVE_BUDGET"
    GET_DAILY_ADVICE = "GET_DAILY_ADVICE"
    COMPLETE_QUIZ = "COMPLETE_QUIZ"
    DAILY_CHECK_IN = "DAILY_CHECK_IN"
    LOG_EXPENSE = "LOG_EXPENSE"


XP_AWARDS: dict[XPAction, int] = {
    XPAction.LOG_INCOME: 10,
    XPAction.SAVE_BUDGET: 15,
    XPAction.GET_DAILY_ADVICE: 20,
    XPAction.COMPLETE_QUIZ: 25,
    XPAction.DAILY_CHECK_IN: 5,
    XPAction.LOG_EXPENSE: 5,
}


def calculate_level(xp: int) -> LevelInfo:
    """Highest tier whose threshold ``xp`` has reached."""
    current = LEVELS[0]
    for tier in LEVELS:
        if xp >= tier.min_xp:
            current = tier
    return current


def get_next_level(xp: int) -> NextLevelInfo | None:
    """Next tier and progress toward it, or None at the top level."""
    current = calculate_level(xp)
    for tier in LEVELS:
        if tier.min_xp > xp:
            span = tier.min_xp - current.min_xp
            return NextLevelInfo(
                level=tier.level,
                name=tier.name,
                emoji=tier.emoji,
                min_xp=tier.min_xp,
                xp_needed=tier.min_xp - xp,
                progress=(xp - current.min_xp) / span * 100,
            )
    return None
