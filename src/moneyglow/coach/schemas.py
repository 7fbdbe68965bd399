"""Pydantic models for coach endpoints."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class QuizResult(str, Enum):
    YOLO = "YOLO"
    CHILL = "CHILL"
    PLAN = "PLAN"
    MASTER = "MASTER"


class AdviceResponse(BaseModel):
    advice: str | None = None
    cached: bool
    xp_awarded: int = 0
    streak_count: int | None = None


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)


class QuizResultRequest(BaseModel):
    result: QuizResult


class QuizResultResponse(BaseModel):
    result: QuizResult
    challenge: str
    xp_awarded: int
