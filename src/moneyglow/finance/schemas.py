"""Pydantic models for finance endpoints."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExpenseCategory(str, Enum):
    NEEDS = "NEEDS"
    WANTS = "WANTS"
    SAVINGS = "SAVINGS"


# --- Income ---


class IncomeCreate(BaseModel):
    source: str = Field(min_length=1, max_length=64)
    type: str = Field(min_length=1, max_length=64)
    amount: float = Field(gt=0)
    date: datetime
    note: str | None = Field(default=None, max_length=500)


class IncomeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    source: str
    type: str
    amount: float
    date: datetime
    note: str | None = None
    created_at: datetime


# --- Expenses ---


class ExpenseCreate(BaseModel):
    category: ExpenseCategory
    subcategory: str = Field(min_length=1, max_length=100)
    amount: float = Field(gt=0)
    date: datetime
    note: str | None = Field(default=None, max_length=500)


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category: ExpenseCategory
    subcategory: str
    amount: float
    date: datetime
    note: str | None = None
    created_at: datetime


class ExpenseListResponse(BaseModel):
    expenses: list[ExpenseResponse]


class DeletedResponse(BaseModel):
    success: bool = True


# --- Budgets ---


class QuickBudgetRequest(BaseModel):
    income: float = Field(gt=0)


class BudgetSnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    income: float
    needs: float
    wants: float
    savings: float
    created_at: datetime


class MonthlyBudgetRequest(BaseModel):
    income: float = Field(gt=0)
    month: int | None = Field(default=None, ge=1, le=12)
    year: int | None = Field(default=None, ge=2020, le=2100)


class MonthlyBudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    month: int
    year: int
    income: float
    needs: float
    wants: float
    savings: float
    updated_at: datetime


class SpentTotals(BaseModel):
    needs: float = 0
    wants: float = 0
    savings: float = 0
    total: float = 0


class MonthlyBudgetView(BaseModel):
    budget: MonthlyBudgetResponse | None = None
    spent: SpentTotals
    tracked_income: float


class MonthlyBudgetSaved(BaseModel):
    budget: MonthlyBudgetResponse
    xp_awarded: int


# --- Insights ---


class MonthSummary(BaseModel):
    month: int
    year: int
    label: str
    income: float
    expenses: float
    net: float


class MonthlySummaryResponse(BaseModel):
    months: list[MonthSummary]


class GraduatedTaxResponse(BaseModel):
    taxable_income: float
    income_tax: float
    percentage_tax: float
    total: float


class TaxEstimateResponse(BaseModel):
    gross: float
    graduated: GraduatedTaxResponse
    flat8: float
    flat8_eligible: bool
    recommended: str
    savings: float


class CompoundYearResponse(BaseModel):
    year: int
    deposited: float
    interest: float
    total: float


class CompoundResponse(BaseModel):
    monthly: float
    years: int
    annual_rate: float
    future_value: float
    total_deposited: float
    interest_earned: float
    breakdown: list[CompoundYearResponse]
