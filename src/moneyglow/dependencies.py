"""Shared FastAPI dependencies."""

from fastapi import Request

from moneyglow.database import get_session as _get_session
from moneyglow.email.service import EmailService
from moneyglow.redis_client import get_optional_redis

get_db = _get_session
get_redis_dep = get_optional_redis


def get_mailer(request: Request) -> EmailService:
    """The app's email service, built once in the lifespan."""
    mailer: EmailService | None = getattr(request.app.state, "mailer", None)
    if mailer is None:
        msg = "Email service not initialized. Start the app through its lifespan."
        raise RuntimeError(msg)
    return mailer
