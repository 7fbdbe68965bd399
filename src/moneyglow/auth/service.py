"""
Magic-link business logic.

Issues single-use login links, consumes them, and purges old ones. Only the
SHA-256 hash of a link token is stored; the raw token exists in the email alone.
"""

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, or_, select, update

from moneyglow.config import get_settings
from moneyglow.db.models import MagicLink, User
from moneyglow.errors import InvalidMagicLink, MagicLinkAlreadyUsed, MagicLinkExpired

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def hash_token(raw_token: str) -> str:
    """Storage form of a link token."""
    return hashlib.sha256(raw_token.encode()).hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_or_create_user(db: AsyncSession, email: str) -> tuple[User, bool]:
    """Find the user for ``email`` or create an un-onboarded one. Returns (user, created)."""
    user = await get_user_by_email(db, email)
    if user is not None:
        return user, False

    user = User(email=normalize_email(email), onboarded=False, income_sources=[])
    db.add(user)
    await db.flush()
    logger.info("user_created", user_id=user.id)
    return user, True


# ---------------------------------------------------------------------------
# Magic links
# ---------------------------------------------------------------------------


async def issue_magic_link(
    db: AsyncSession,
    email: str,
    now: datetime | None = None,
) -> tuple[User, str, bool]:
    """
    Create a login link for ``email``, registering the user on first contact.

    The caller commits and then emails the link. A failed send leaves the row
    in place; it simply expires.

    Returns:
        (user, raw_token, created)
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    user, created = await get_or_create_user(db, email)

    raw_token = secrets.token_urlsafe(32)
    link = MagicLink(
        user_id=user.id,
        token_hash=hash_token(raw_token),
        created_at=now,
        expires_at=now + timedelta(minutes=settings.magic_link_ttl_minutes),
    )
    db.add(link)
    await db.flush()
    logger.info("magic_link_issued", user_id=user.id, new_user=created)
    return user, raw_token, created


def build_magic_link_url(raw_token: str) -> str:
    """Verification URL embedded in the login email."""
    settings = get_settings()
    return f"{settings.app_base_url.rstrip('/')}/verify?token={raw_token}"


async def consume_magic_link(
    db: AsyncSession,
    raw_token: str,
    now: datetime | None = None,
) -> User:
    """
    Spend a magic link and return its user.

    Raises:
        InvalidMagicLink: Unknown token.
        MagicLinkAlreadyUsed: Already consumed, including by a concurrent request.
        MagicLinkExpired: Past ``expires_at``.
    """
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        select(MagicLink)
        .where(MagicLink.token_hash == hash_token(raw_token))
        .execution_options(populate_existing=True)
    )
    link = result.scalar_one_or_none()

    if link is None:
        raise InvalidMagicLink
    if link.used_at is not None:
        raise MagicLinkAlreadyUsed
    if now > link.expires_at:
        raise MagicLinkExpired

    # Only the request whose UPDATE matches the unused row wins.
    claimed = await db.execute(
        update(MagicLink)
        .where(MagicLink.id == link.id)
        .where(MagicLink.used_at.is_(None))
        .values(used_at=now)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        logger.warning("magic_link_race_lost", link_id=link.id)
        raise MagicLinkAlreadyUsed

    user = await get_user_by_id(db, link.user_id)
    if user is None:
        raise InvalidMagicLink
    await db.flush()
    logger.info("magic_link_consumed", user_id=user.id)
    return user


async def purge_magic_links(
    db: AsyncSession,
    now: datetime | None = None,
    retention_days: int | None = None,
) -> int:
    """Delete links that expired or were used more than ``retention_days`` ago. Returns rows deleted."""
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    days = settings.magic_link_retention_days if retention_days is None else retention_days
    cutoff = now - timedelta(days=days)

    result = await db.execute(
        delete(MagicLink)
        .where(or_(MagicLink.expires_at < cutoff, MagicLink.used_at < cutoff))
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    deleted = result.rowcount or 0
    logger.info("magic_links_purged", deleted=deleted, cutoff=cutoff.isoformat())
    return deleted


# ---------------------------------------------------------------------------
# Resend cooldown (Redis)
# ---------------------------------------------------------------------------


async def claim_resend_slot(redis: Redis | None, email: str) -> bool:
    """
    Reserve the per-address cooldown window.

    Returns False when a link was requested for this address within the
    cooldown. Without Redis there is no cooldown.
    """
    if redis is None:
        return True
    settings = get_settings()
    key = f"magic_link_cooldown:{hash_token(normalize_email(email))}"
    claimed = await redis.set(key, "1", ex=settings.magic_link_resend_cooldown_seconds, nx=True)
    return bool(claimed)


def redirect_for(user: User) -> str:
    """Where the frontend goes after a successful login."""
    return "/dashboard" if user.onboarded else "/onboarding"
