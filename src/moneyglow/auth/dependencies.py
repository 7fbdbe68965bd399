"""FastAPI authentication dependencies (cookie sessions)."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.service import get_user_by_id
from moneyglow.auth.session import SessionPayload, verify_session
from moneyglow.config import get_settings
from moneyglow.db.models import User
from moneyglow.dependencies import get_db
from moneyglow.errors import Forbidden, Unauthorized


async def get_optional_session(request: Request) -> SessionPayload | None:
    """Decoded session cookie, or None."""
    token = request.cookies.get(get_settings().session_cookie_name)
    return verify_session(token)


async def require_auth(
    session: SessionPayload | None = Depends(get_optional_session),
) -> SessionPayload:
    """Valid session or 401."""
    if session is None:
        raise Unauthorized
    return session


async def get_current_user(
    session: SessionPayload = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The signed-in user's row. A session for a deleted user is a 401."""
    user = await get_user_by_id(db, session.user_id)
    if user is None:
        raise Unauthorized
    return user


async def require_admin(
    session: SessionPayload = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SessionPayload:
    """
    Session of a signed-in admin, or an error.

    The admin flag is read from the database on every call, so revoking it
    takes effect immediately even for live sessions.

    Raises:
        Unauthorized: No valid session, or the user no longer exists.
        Forbidden: The user is not an admin.
    """
    user = await get_user_by_id(db, session.user_id)
    if user is None:
        raise Unauthorized
    if not user.is_admin:
        raise Forbidden
    return session
