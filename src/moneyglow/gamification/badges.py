"""Achievement badges.

Badges are derived on every read from the user's counters and are never
stored, so they can't drift from the underlying data.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.db.models import User
from moneyglow.errors import UserNotFound
from moneyglow.gamification.counters import get_activity_counters


@dataclass(frozen=True)
class BadgeInputs:
    income_entries: int
    monthly_budgets: int
    expenses: int
    quiz_result: str | None
    longest_streak: int
    level: int


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    emoji: str
    name: str
    description: str
    color: str
    check: Callable[[BadgeInputs], bool]


@dataclass(frozen=True)
class Badge:
    id: str
    emoji: str
    name: str
    description: str
    color: str
    earned: bool


BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition("first_peso", "💰", "First Peso", "Log your first income entry", "#FFB86C",
                    lambda i: i.income_entries >= 1),
    BadgeDefinition("hustler", "🔥", "Hustler", "Log 10+ income entries", "#FF6B9D",
                    lambda i: i.income_entries >= 10),
    BadgeDefinition("money_machine", "🤑", "Money Machine", "Log 50+ income entries", "#50E3C2",
                    lambda i: i.income_entries >= 50),
    BadgeDefinition("budget_boss", "📋", "Budget Boss", "Create your first monthly budget", "#6C9CFF",
                    lambda i: i.monthly_budgets >= 1),
    BadgeDefinition("self_aware", "🧠", "Self-Aware", "Complete the money personality quiz", "#FFB86C",
                    lambda i: i.quiz_result is not None),
    BadgeDefinition("week_warrior", "⚡", "Week Warrior", "7+ day streak", "#FF6B9D",
                    lambda i: i.longest_streak >= 7),
    BadgeDefinition("monthly_master", "👑", "Monthly Master", "30+ day streak", "#50E3C2",
                    lambda i: i.longest_streak >= 30),
    BadgeDefinition("rising_star", "⭐", "Rising Star", "Reach Level 2", "#FFB86C",
                    lambda i: i.level >= 2),
    BadgeDefinition("money_master", "💎", "Money Master", "Reach Level 4 (max)", "#50E3C2",
                    lambda i: i.level >= 4),
    BadgeDefinition("tracker", "📝", "Tracker", "Log your first expense", "#6C9CFF",
                    lambda i: i.expenses >= 1),
)


def evaluate_badges(inputs: BadgeInputs) -> list[Badge]:
    """Every catalog badge, in catalog order, with its earned flag."""
    return [
        Badge(
            id=definition.id,
            emoji=definition.emoji,
            name=definition.name,
            description=definition.description,
            color=definition.color,
            earned=definition.check(inputs),
        )
        for definition in BADGE_CATALOG
    ]


async def compute_badges(db: AsyncSession, user_id: str) -> list[Badge]:
    """Load the user's counters and evaluate the catalog.

    Raises:
        UserNotFound: No such user.
    """
    result = await db.execute(
        select(User.quiz_result, User.longest_streak, User.level).where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise UserNotFound
    quiz_result, longest_streak, level = row

    counters = await get_activity_counters(db, user_id)
    return evaluate_badges(
        BadgeInputs(
            income_entries=counters.income_entries,
            monthly_budgets=counters.monthly_budgets,
            expenses=counters.expenses,
            quiz_result=quiz_result,
            longest_streak=longest_streak,
            level=level,
        )
    )
