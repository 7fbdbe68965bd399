"""Profile writes."""

from __future__ import annotations

from enum import Enum

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.db.models import User
from moneyglow.email.service import EmailService
from moneyglow.users.schemas import NULLABLE_PROFILE_FIELDS, OnboardingRequest, ProfileUpdateRequest

logger = structlog.get_logger()


def _plain(value: object) -> object:
    return value.value if isinstance(value, Enum) else value


async def complete_onboarding(db: AsyncSession, user: User, data: OnboardingRequest) -> User:
    """Store the onboarding answers and mark the user onboarded."""
    for field, value in data.model_dump().items():
        setattr(user, field, _plain(value))
    user.onboarded = True
    await db.flush()
    logger.info("user_onboarded", user_id=user.id, goal=user.financial_goal)
    return user


async def update_profile(db: AsyncSession, user: User, data: ProfileUpdateRequest) -> User:
    """Apply the fields the client sent. Null clears only the optional enum answers."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in NULLABLE_PROFILE_FIELDS:
            continue
        setattr(user, field, _plain(value))
    await db.flush()
    return user


async def send_welcome_email(mailer: EmailService, user: User, dashboard_url: str) -> None:
    """Best effort: a failed welcome email is logged and otherwise ignored."""
    sent = await mailer.send_template(user.email, "welcome", {"name": user.name, "dashboard_url": dashboard_url})
    if not sent:
        logger.warning("welcome_email_not_sent", user_id=user.id)
