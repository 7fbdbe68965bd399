"""Money tracking and insight endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.dependencies import get_current_user
from moneyglow.db.models import User
from moneyglow.dependencies import get_db
from moneyglow.finance import service
from moneyglow.finance.calculators import estimate_tax, project_compound
from moneyglow.finance.schemas import (
    BudgetSnapshotResponse,
    CompoundResponse,
    DeletedResponse,
    ExpenseCreate,
    ExpenseListResponse,
    ExpenseResponse,
    IncomeCreate,
    IncomeResponse,
    MonthlyBudgetRequest,
    MonthlyBudgetResponse,
    MonthlyBudgetSaved,
    MonthlyBudgetView,
    MonthlySummaryResponse,
    QuickBudgetRequest,
    SpentTotals,
    TaxEstimateResponse,
)
from moneyglow.gamification.levels import XPAction
from moneyglow.gamification.streak_service import local_day
from moneyglow.gamification.xp_service import award_xp

router = APIRouter(prefix="/api", tags=["Finance"])


def _current_period(year: int | None, month: int | None) -> tuple[int, int]:
    today = local_day(datetime.now(timezone.utc))
    return year or today.year, month or today.month


# ── Income ──


@router.get("/income", response_model=list[IncomeResponse])
async def list_income(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[IncomeResponse]:
    """Latest 100 income entries, newest first."""
    entries = await service.list_income(db, user.id)
    return [IncomeResponse.model_validate(e) for e in entries]


@router.post("/income", response_model=IncomeResponse, status_code=201)
async def create_income(
    body: IncomeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> IncomeResponse:
    entry = await service.add_income(db, user.id, body)
    await award_xp(db, user.id, XPAction.LOG_INCOME)
    await db.commit()
    return IncomeResponse.model_validate(entry)


@router.delete("/income/{entry_id}", response_model=DeletedResponse)
async def delete_income(
    entry_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    if not await service.delete_income(db, user.id, entry_id):
        raise HTTPException(status_code=404, detail="Not found")
    await db.commit()
    return DeletedResponse()


# ── Expenses ──


@router.get("/expenses", response_model=ExpenseListResponse)
async def list_expenses(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2020, le=2100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ExpenseListResponse:
    year, month = _current_period(year, month)
    expenses = await service.list_expenses(db, user.id, year, month)
    return ExpenseListResponse(expenses=[ExpenseResponse.model_validate(e) for e in expenses])


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    body: ExpenseCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ExpenseResponse:
    expense = await service.add_expense(db, user.id, body)
    await award_xp(db, user.id, XPAction.LOG_EXPENSE)
    await db.commit()
    return ExpenseResponse.model_validate(expense)


@router.delete("/expenses/{expense_id}", response_model=DeletedResponse)
async def delete_expense(
    expense_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    if not await service.delete_expense(db, user.id, expense_id):
        raise HTTPException(status_code=404, detail="Not found")
    await db.commit()
    return DeletedResponse()


# ── Budgets ──


@router.get("/budget", response_model=list[BudgetSnapshotResponse])
async def list_budget_snapshots(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[BudgetSnapshotResponse]:
    snapshots = await service.list_snapshots(db, user.id)
    return [BudgetSnapshotResponse.model_validate(s) for s in snapshots]


@router.post("/budget", response_model=BudgetSnapshotResponse, status_code=201)
async def quick_budget(
    body: QuickBudgetRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> BudgetSnapshotResponse:
    """Run the 50/30/20 calculator and keep the result."""
    snapshot = await service.record_snapshot(db, user.id, body.income)
    await db.commit()
    return BudgetSnapshotResponse.model_validate(snapshot)


@router.get("/monthly-budget", response_model=MonthlyBudgetView)
async def get_monthly_budget(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2020, le=2100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MonthlyBudgetView:
    """The month's plan next to what was actually spent and earned."""
    year, month = _current_period(year, month)
    budget = await service.get_monthly_budget(db, user.id, year, month)
    by_category = await service.sum_spent_by_category(db, user.id, year, month)
    tracked_income = await service.sum_income(db, user.id, year, month)

    return MonthlyBudgetView(
        budget=MonthlyBudgetResponse.model_validate(budget) if budget else None,
        spent=SpentTotals(**by_category, total=sum(by_category.values())),
        tracked_income=tracked_income,
    )


@router.post("/monthly-budget", response_model=MonthlyBudgetSaved)
async def save_monthly_budget(
    body: MonthlyBudgetRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MonthlyBudgetSaved:
    year, month = _current_period(body.year, body.month)
    budget = await service.save_monthly_budget(db, user.id, body.income, year, month)
    award = await award_xp(db, user.id, XPAction.SAVE_BUDGET)
    await db.commit()
    return MonthlyBudgetSaved(budget=MonthlyBudgetResponse.model_validate(budget), xp_awarded=award.xp_awarded)


# ── Insights ──


@router.get("/insights/monthly-summary", response_model=MonthlySummaryResponse)
async def monthly_summary(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MonthlySummaryResponse:
    """Income vs expenses for the last six months, current month included."""
    year, month = _current_period(None, None)
    months = await service.monthly_summary(db, user.id, year, month)
    return MonthlySummaryResponse.model_validate({"months": months})


@router.get("/insights/tax-estimate", response_model=TaxEstimateResponse)
async def tax_estimate(
    gross: float = Query(ge=0, le=1_000_000_000),
    _user: User = Depends(get_current_user),
) -> TaxEstimateResponse:
    """Graduated (40% OSD + 3% percentage tax) vs 8% flat for an annual gross."""
    return TaxEstimateResponse.model_validate(asdict(estimate_tax(gross)))


@router.get("/insights/compound", response_model=CompoundResponse)
async def compound(
    monthly: float = Query(ge=0, le=10_000_000),
    years: int = Query(ge=1, le=50),
    rate: float = Query(default=6.0, ge=0, le=100),
    _user: User = Depends(get_current_user),
) -> CompoundResponse:
    return CompoundResponse.model_validate(asdict(project_compound(monthly, years, rate)))
