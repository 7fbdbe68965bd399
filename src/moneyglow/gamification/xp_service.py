"""XP awards with atomic increments and level-up detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.db.models import User
from moneyglow.errors import UserNotFound
from moneyglow.gamification.levels import XP_AWARDS, XPAction, calculate_level

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XPAward:
    xp: int
    level: int
    xp_awarded: int
    leveled_up: bool = False


async def award_xp(db: AsyncSession, user_id: str, action: XPAction) -> XPAward:
    """Add the XP for ``action`` to the user and re-derive their level.

    The increment happens inside the UPDATE, so concurrent awards for the same
    user add up instead of overwriting each other. The level write is
    idempotent: it is always recomputed from the post-increment total.

    Raises:
        UserNotFound: No such user.
    """
    amount = XP_AWARDS[action]

    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(xp=User.xp + amount)
        .returning(User.xp, User.level)
    )
    row = result.one_or_none()
    if row is None:
        raise UserNotFound

    new_xp, old_level = int(row[0]), int(row[1])
    new_level = calculate_level(new_xp).level
    if new_level != old_level:
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(level=new_level)
        )
    await db.flush()

    logger.info("xp_awarded user=%s action=%s amount=%d total=%d", user_id, action.value, amount, new_xp)
    leveled_up = new_level > old_level
    if leveled_up:
        logger.info("level_up user=%s from=%d to=%d", user_id, old_level, new_level)

    return XPAward(xp=new_xp, level=new_level, xp_awarded=amount, leveled_up=leveled_up)
