"""Domain exceptions.

Every condition carries a short machine-readable ``reason``. The HTTP layer
maps them to status codes in ``moneyglow.middleware.error_handler``.
"""

from __future__ import annotations


class MoneyGlowError(Exception):
    """Base class for domain errors."""

    reason: str = "Something went wrong"
    status_code: int = 500

    def __init__(self, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class Unauthorized(MoneyGlowError):
    """No session, or the session failed verification."""

    reason = "Unauthorized"
    status_code = 401


class Forbidden(MoneyGlowError):
    """Valid session, but the user lacks the admin flag."""

    reason = "Forbidden"
    status_code = 403


class MagicLinkError(MoneyGlowError):
    """Base for terminal magic-link verification failures."""

    status_code = 400


class InvalidMagicLink(MagicLinkError):
    reason = "Invalid or expired link"


class MagicLinkAlreadyUsed(MagicLinkError):
    reason = "This link has already been used"


class MagicLinkExpired(MagicLinkError):
    reason = "This link has expired"


class MailDispatchError(MoneyGlowError):
    """The mail collaborator failed to deliver a login link."""

    reason = "Failed to send magic link"
    status_code = 502


class UserNotFound(MoneyGlowError):
    reason = "User not found"
    status_code = 404


class CoachUnavailable(MoneyGlowError):
    """The AI coach has no API key configured."""

    reason = "AI coach is not configured"
    status_code = 503
