"""Daily check-in streaks.

Days are calendar days in the app timezone (``MG_APP_TIMEZONE``), so a
check-in at 23:50 and another at 00:10 local time are consecutive days.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.config import get_settings
from moneyglow.db.models import User
from moneyglow.errors import UserNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakResult:
    streak_count: int
    longest_streak: int
    is_new: bool


@lru_cache
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def local_day(moment: datetime, tz_name: str | None = None) -> date:
    """Calendar day of ``moment`` in the app timezone."""
    tz = _zone(tz_name or get_settings().app_timezone)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def evaluate_streak(
    last_day: date | None,
    today: date,
    streak_count: int,
    longest_streak: int,
) -> StreakResult:
    """Next streak state for a check-in on ``today``.

    - first ever check-in: streak 1
    - same day: unchanged, not new
    - next day: streak + 1
    - gap of two or more days: back to 1
    - last check-in in the future (clock skew): treated as a break, back to 1
    """
    if last_day is None:
        return StreakResult(streak_count=1, longest_streak=max(1, longest_streak), is_new=True)

    diff = (today - last_day).days
    if diff == 0:
        return StreakResult(streak_count=streak_count, longest_streak=longest_streak, is_new=False)
    if diff == 1:
        new_streak = streak_count + 1
        return StreakResult(streak_count=new_streak, longest_streak=max(new_streak, longest_streak), is_new=True)
    return StreakResult(streak_count=1, longest_streak=max(1, longest_streak), is_new=True)


async def update_streak(db: AsyncSession, user_id: str, now: datetime | None = None) -> StreakResult:
    """Record a check-in for ``user_id`` at ``now``.

    The write is conditional on ``last_check_in`` still holding the value read
    here. If a concurrent check-in got there first, nothing is written and the
    stored counters are reported with ``is_new=False``.

    Raises:
        UserNotFound: No such user.
    """
    now = now or datetime.now(timezone.utc)

    result = await db.execute(
        select(User.streak_count, User.longest_streak, User.last_check_in).where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise UserNotFound
    streak_count, longest_streak, last_check_in = row

    last_day = local_day(last_check_in) if last_check_in is not None else None
    outcome = evaluate_streak(last_day, local_day(now), streak_count, longest_streak)
    if not outcome.is_new:
        return outcome

    guard = User.last_check_in.is_(None) if last_check_in is None else User.last_check_in == last_check_in
    written = await db.execute(
        update(User)
        .where(User.id == user_id)
        .where(guard)
        .values(
            streak_count=outcome.streak_count,
            longest_streak=outcome.longest_streak,
            last_check_in=now,
        )
        .execution_options(synchronize_session="fetch")
    )
    await db.flush()

    if written.rowcount != 1:
        current = await db.execute(
            select(User.streak_count, User.longest_streak).where(User.id == user_id)
        )
        stored_streak, stored_longest = current.one()
        logger.info("streak_check_in_raced user=%s", user_id)
        return StreakResult(streak_count=stored_streak, longest_streak=stored_longest, is_new=False)

    logger.info("streak_updated user=%s streak=%d longest=%d", user_id, outcome.streak_count, outcome.longest_streak)
    return outcome
