"""
Signed session tokens carried in the ``moneyglow_session`` cookie.

A session is an HS256 JWT holding the user id (``sub``) and email. There is no
server-side session store: logout only deletes the cookie, and a token stays
valid until ``exp``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog
from fastapi import Response

from moneyglow.config import get_settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class SessionPayload:
    """Identity carried by a session token."""

    user_id: str
    email: str


def create_session(payload: SessionPayload, now: datetime | None = None) -> str:
    """
    Sign a session token.

    Args:
        payload: The user identity to embed.
        now: Issue time; defaults to the current UTC time.

    Returns:
        Encoded JWT string valid for ``session_expire_days``.
    """
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": payload.user_id,
        "email": payload.email,
        "iat": issued,
        "exp": issued + timedelta(days=settings.session_expire_days),
    }
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def verify_session(token: str | None) -> SessionPayload | None:
    """
    Decode and verify a session token.

    Returns None for a missing, tampered, expired or malformed token. Never raises.
    """
    if not token:
        return None
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.debug("session_rejected", error=str(exc))
        return None

    user_id = claims.get("sub")
    email = claims.get("email")
    if not isinstance(user_id, str) or not isinstance(email, str):
        return None
    return SessionPayload(user_id=user_id, email=email)


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session cookie (httpOnly, SameSite=lax, 7 days, path /)."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    """Delete the session cookie."""
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
