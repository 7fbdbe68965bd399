"""Coach client injection."""

from __future__ import annotations

from fastapi import Request

from moneyglow.coach.client import CoachClient
from moneyglow.errors import CoachUnavailable


def get_coach(request: Request) -> CoachClient:
    """The app's coach client. 503 when no API key is configured."""
    coach: CoachClient | None = getattr(request.app.state, "coach", None)
    if coach is None or not coach.configured:
        raise CoachUnavailable
    return coach
