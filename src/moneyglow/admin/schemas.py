"""Pydantic models for feedback and admin endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from moneyglow.auth.schemas import ProfileResponse
from moneyglow.gamification.schemas import BadgeResponse


class FeedbackCreate(BaseModel):
    rating: int = Field(ge=-1, le=1)
    reason: str | None = Field(default=None, max_length=500)
    context: str | None = Field(default=None, max_length=50)
    page: str | None = Field(default=None, max_length=100)


class FeedbackSaved(BaseModel):
    message: str = "Feedback saved"


class AdminStatsResponse(BaseModel):
    total_users: int
    onboarded_users: int
    active_users: int
    total_income: float
    total_expenses: float
    total_budgets: int
    quiz_completion_rate: int
    level_distribution: dict[int, int]


class AdminUserRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    onboarded: bool
    level: int
    xp: int
    streak_count: int
    longest_streak: int
    quiz_result: str | None = None
    is_admin: bool
    created_at: datetime


class AdminUserList(BaseModel):
    users: list[AdminUserRow]
    total: int
    page: int
    limit: int


class ActivityCounts(BaseModel):
    income_entries: int
    expenses: int
    monthly_budgets: int
    chat_messages: int
    daily_advice: int


class AdminUserDetail(BaseModel):
    user: ProfileResponse
    counts: ActivityCounts
    glow_score: int
    badges: list[BadgeResponse]


class FeedbackAuthor(BaseModel):
    email: str
    name: str | None = None


class FeedbackRow(BaseModel):
    id: str
    rating: int
    reason: str | None = None
    context: str | None = None
    page: str | None = None
    created_at: datetime
    user: FeedbackAuthor


class RatingCounts(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class AdminFeedbackList(BaseModel):
    feedback: list[FeedbackRow]
    total: int
    page: int
    total_pages: int
    stats: RatingCounts
