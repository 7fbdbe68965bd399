"""Onboarding and profile endpoints: /api/user/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.dependencies import get_current_user
from moneyglow.auth.schemas import ProfileResponse
from moneyglow.config import get_settings
from moneyglow.db.models import User
from moneyglow.dependencies import get_db, get_mailer
from moneyglow.email.service import EmailService
from moneyglow.users.schemas import OnboardingRequest, ProfileUpdateRequest
from moneyglow.users.service import complete_onboarding, send_welcome_email, update_profile

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.post("/onboarding", response_model=ProfileResponse)
async def onboarding(
    body: OnboardingRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    mailer: EmailService = Depends(get_mailer),
) -> ProfileResponse:
    """Save onboarding answers, then send the welcome email."""
    user = await complete_onboarding(db, user, body)
    await db.commit()
    await send_welcome_email(mailer, user, f"{get_settings().app_base_url.rstrip('/')}/dashboard")
    return ProfileResponse.model_validate(user)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(user)


@router.put("/profile", response_model=ProfileResponse)
async def put_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    user = await update_profile(db, user, body)
    await db.commit()
    return ProfileResponse.model_validate(user)
