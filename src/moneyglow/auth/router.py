"""Passwordless auth endpoints: /api/auth/*."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.dependencies import get_current_user
from moneyglow.auth.schemas import (
    LogoutResponse,
    ProfileResponse,
    SendMagicLinkRequest,
    SendMagicLinkResponse,
    VerifyResponse,
)
from moneyglow.auth.service import (
    build_magic_link_url,
    claim_resend_slot,
    consume_magic_link,
    issue_magic_link,
    redirect_for,
)
from moneyglow.auth.session import SessionPayload, clear_session_cookie, create_session, set_session_cookie
from moneyglow.config import get_settings
from moneyglow.db.models import User
from moneyglow.dependencies import get_db, get_mailer, get_redis_dep
from moneyglow.email.service import EmailService
from moneyglow.errors import MailDispatchError

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/send-magic-link", response_model=SendMagicLinkResponse)
async def send_magic_link(
    body: SendMagicLinkRequest,
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis_dep),
    mailer: EmailService = Depends(get_mailer),
) -> SendMagicLinkResponse:
    """Email a one-time login link, creating the account on first use."""
    settings = get_settings()
    if not await claim_resend_slot(redis, body.email):
        raise HTTPException(
            status_code=429,
            detail="Please wait a minute before requesting another link",
            headers={"Retry-After": str(settings.magic_link_resend_cooldown_seconds)},
        )

    user, raw_token, _created = await issue_magic_link(db, body.email)
    await db.commit()

    sent = await mailer.send_template(
        user.email,
        "magic_link",
        {"magic_url": build_magic_link_url(raw_token), "expires_minutes": settings.magic_link_ttl_minutes},
    )
    if not sent:
        logger.warning("magic_link_dispatch_failed", user_id=user.id)
        raise MailDispatchError
    return SendMagicLinkResponse()


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    response: Response,
    token: str = Query(min_length=1),
    db: AsyncSession = Depends(get_db),
) -> VerifyResponse:
    """Spend a magic link and start a session."""
    user = await consume_magic_link(db, token)
    await db.commit()

    session_token = create_session(SessionPayload(user_id=user.id, email=user.email))
    set_session_cookie(response, session_token)
    logger.info("session_started", user_id=user.id)
    return VerifyResponse(redirect_to=redirect_for(user))


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Drop the session cookie. Tokens are not revoked server-side."""
    clear_session_cookie(response)
    return LogoutResponse()


@router.get("/me", response_model=ProfileResponse)
async def me(user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(user)
