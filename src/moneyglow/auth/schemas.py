"""Pydantic request/response models for auth endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr


class SendMagicLinkRequest(BaseModel):
    email: EmailStr


class SendMagicLinkResponse(BaseModel):
    success: bool = True
    message: str = "Check your email for a login link"


class VerifyResponse(BaseModel):
    success: bool = True
    redirect_to: str


class LogoutResponse(BaseModel):
    success: bool = True


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    age: int | None = None
    income_sources: list[str] = []
    monthly_income: float | None = None
    financial_goal: str | None = None
    employment_status: str | None = None
    has_emergency_fund: str | None = None
    debt_situation: str | None = None
    language_pref: str = "ENGLISH"
    quiz_result: str | None = None
    quiz_challenge: str | None = None
    onboarded: bool = False
    is_admin: bool = False
    xp: int = 0
    level: int = 1
    streak_count: int = 0
    longest_streak: int = 0
    last_check_in: datetime | None = None
    created_at: datetime
