"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from pydantic import BaseModel


# --- Levels ---


class LevelEntry(BaseModel):
    level: int
    name: str
    emoji: str
    min_xp: int


class NextLevelResponse(BaseModel):
    level: int
    name: str
    emoji: str
    min_xp: int
    xp_needed: int
    progress: float


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]


# --- Stats ---


class GlowBreakdownResponse(BaseModel):
    tracking: int
    budget: int
    streak: int
    engagement: int


class UserStatsResponse(BaseModel):
    xp: int
    level: int
    level_name: str
    level_emoji: str
    next_level: NextLevelResponse | None = None
    streak_count: int
    longest_streak: int
    glow_score: int
    glow_label: str
    glow_emoji: str
    glow_breakdown: GlowBreakdownResponse


# --- Badges ---


class BadgeResponse(BaseModel):
    id: str
    emoji: str
    name: str
    description: str
    color: str
    earned: bool


class UserBadgesResponse(BaseModel):
    badges: list[BadgeResponse]
    earned_count: int
    total_count: int
