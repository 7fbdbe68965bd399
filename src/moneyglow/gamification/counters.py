"""Activity counts that feed badges and the glow score."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.db.models import BudgetSnapshot, Expense, IncomeEntry, MonthlyBudget


@dataclass(frozen=True)
class ActivityCounters:
    income_entries: int
    monthly_budgets: int
    expenses: int


async def _count(db: AsyncSession, stmt) -> int:  # noqa: ANN001
    result = await db.execute(stmt)
    return int(result.scalar_one() or 0)


async def get_activity_counters(db: AsyncSession, user_id: str) -> ActivityCounters:
    """Lifetime counts for one user."""
    income = await _count(db, select(func.count(IncomeEntry.id)).where(IncomeEntry.user_id == user_id))
    budgets = await _count(db, select(func.count(MonthlyBudget.id)).where(MonthlyBudget.user_id == user_id))
    expenses = await _count(db, select(func.count(Expense.id)).where(Expense.user_id == user_id))
    return ActivityCounters(income_entries=income, monthly_budgets=budgets, expenses=expenses)


async def count_income_entries_since(db: AsyncSession, user_id: str, since: datetime) -> int:
    return await _count(
        db,
        select(func.count(IncomeEntry.id)).where(IncomeEntry.user_id == user_id, IncomeEntry.created_at >= since),
    )


async def count_budget_saves_since(db: AsyncSession, user_id: str, since: datetime) -> int:
    return await _count(
        db,
        select(func.count(BudgetSnapshot.id)).where(
            BudgetSnapshot.user_id == user_id, BudgetSnapshot.created_at >= since
        ),
    )
