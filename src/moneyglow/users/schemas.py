"""Onboarding and profile request models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class FinancialGoal(str, Enum):
    SAVE_EMERGENCY_FUND = "SAVE_EMERGENCY_FUND"
    PAY_OFF_DEBT = "PAY_OFF_DEBT"
    START_INVESTING = "START_INVESTING"
    BUDGET_BETTER = "BUDGET_BETTER"
    GROW_CREATOR_INCOME = "GROW_CREATOR_INCOME"


class EmploymentStatus(str, Enum):
    FULL_TIME_CREATOR = "FULL_TIME_CREATOR"
    STUDENT = "STUDENT"
    PART_TIME_PLUS_CREATOR = "PART_TIME_PLUS_CREATOR"
    EMPLOYED_PLUS_SIDE_HUSTLE = "EMPLOYED_PLUS_SIDE_HUSTLE"


class EmergencyFundStatus(str, Enum):
    YES = "YES"
    NO = "NO"
    BUILDING = "BUILDING"


class DebtSituation(str, Enum):
    NONE = "NONE"
    STUDENT_LOAN = "STUDENT_LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    INFORMAL_DEBT = "INFORMAL_DEBT"


class LanguagePref(str, Enum):
    ENGLISH = "ENGLISH"
    TAGLISH = "TAGLISH"


class OnboardingRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    age: int = Field(ge=13, le=100)
    income_sources: list[str] = Field(min_length=1)
    monthly_income: float = Field(ge=0)
    financial_goal: FinancialGoal
    employment_status: EmploymentStatus | None = None
    has_emergency_fund: EmergencyFundStatus | None = None
    debt_situation: DebtSituation | None = None
    language_pref: LanguagePref = LanguagePref.ENGLISH


class ProfileUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are written."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    age: int | None = Field(default=None, ge=13, le=100)
    income_sources: list[str] | None = None
    monthly_income: float | None = Field(default=None, ge=0)
    financial_goal: FinancialGoal | None = None
    employment_status: EmploymentStatus | None = None
    has_emergency_fund: EmergencyFundStatus | None = None
    debt_situation: DebtSituation | None = None
    language_pref: LanguagePref | None = None


# Columns that may be cleared by sending null.
NULLABLE_PROFILE_FIELDS = frozenset({"employment_status", "has_emergency_fund", "debt_situation"})
