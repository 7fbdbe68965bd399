"""Income, expense and budget persistence plus monthly aggregates."""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.database import dialect_insert
from moneyglow.db.models import BudgetSnapshot, Expense, IncomeEntry, MonthlyBudget
from moneyglow.finance.calculators import split_budget
from moneyglow.finance.schemas import ExpenseCreate, IncomeCreate

logger = logging.getLogger(__name__)

SUMMARY_MONTHS = 6
INCOME_LIST_LIMIT = 100
SNAPSHOT_LIST_LIMIT = 10


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[start, end) of a calendar month in UTC."""
    next_year, next_month = shift_month(year, month, 1)
    return (
        datetime(year, month, 1, tzinfo=timezone.utc),
        datetime(next_year, next_month, 1, tzinfo=timezone.utc),
    )


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


async def list_income(db: AsyncSession, user_id: str) -> list[IncomeEntry]:
    result = await db.execute(
        select(IncomeEntry)
        .where(IncomeEntry.user_id == user_id)
        .order_by(IncomeEntry.date.desc())
        .limit(INCOME_LIST_LIMIT)
    )
    return list(result.scalars().all())


async def add_income(db: AsyncSession, user_id: str, data: IncomeCreate) -> IncomeEntry:
    entry = IncomeEntry(user_id=user_id, **data.model_dump())
    db.add(entry)
    await db.flush()
    return entry


async def delete_income(db: AsyncSession, user_id: str, entry_id: str) -> bool:
    """Delete an entry the user owns. False if it doesn't exist or isn't theirs."""
    result = await db.execute(
        delete(IncomeEntry).where(IncomeEntry.id == entry_id, IncomeEntry.user_id == user_id)
    )
    return bool(result.rowcount)


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


async def list_expenses(db: AsyncSession, user_id: str, year: int, month: int) -> list[Expense]:
    start, end = month_bounds(year, month)
    result = await db.execute(
        select(Expense)
        .where(Expense.user_id == user_id, Expense.date >= start, Expense.date < end)
        .order_by(Expense.date.desc())
    )
    return list(result.scalars().all())


async def add_expense(db: AsyncSession, user_id: str, data: ExpenseCreate) -> Expense:
    payload = data.model_dump()
    payload["category"] = data.category.value
    expense = Expense(user_id=user_id, **payload)
    db.add(expense)
    await db.flush()
    return expense


async def delete_expense(db: AsyncSession, user_id: str, expense_id: str) -> bool:
    result = await db.execute(delete(Expense).where(Expense.id == expense_id, Expense.user_id == user_id))
    return bool(result.rowcount)


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------


async def list_snapshots(db: AsyncSession, user_id: str) -> list[BudgetSnapshot]:
    result = await db.execute(
        select(BudgetSnapshot)
        .where(BudgetSnapshot.user_id == user_id)
        .order_by(BudgetSnapshot.created_at.desc())
        .limit(SNAPSHOT_LIST_LIMIT)
    )
    return list(result.scalars().all())


async def record_snapshot(db: AsyncSession, user_id: str, income: float, rounded: bool = False) -> BudgetSnapshot:
    """Append a 50/30/20 snapshot. Every budget save lands here."""
    split = split_budget(income, rounded=rounded)
    snapshot = BudgetSnapshot(
        user_id=user_id, income=income, needs=split.needs, wants=split.wants, savings=split.savings
    )
    db.add(snapshot)
    await db.flush()
    return snapshot


async def get_monthly_budget(db: AsyncSession, user_id: str, year: int, month: int) -> MonthlyBudget | None:
    result = await db.execute(
        select(MonthlyBudget)
        .where(MonthlyBudget.user_id == user_id, MonthlyBudget.month == month, MonthlyBudget.year == year)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def save_monthly_budget(db: AsyncSession, user_id: str, income: float, year: int, month: int) -> MonthlyBudget:
    """Create or replace the month's budget and append a snapshot."""
    split = split_budget(income, rounded=True)
    now = datetime.now(timezone.utc)
    values = {"income": income, "needs": split.needs, "wants": split.wants, "savings": split.savings}

    insert = dialect_insert(db)
    stmt = insert(MonthlyBudget).values(user_id=user_id, month=month, year=year, updated_at=now, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "month", "year"],
        set_={**values, "updated_at": now},
    )
    await db.execute(stmt)

    await record_snapshot(db, user_id, income, rounded=True)
    budget = await get_monthly_budget(db, user_id, year, month)
    if budget is None:
        msg = "monthly budget upsert returned no row"
        raise RuntimeError(msg)
    logger.info("monthly_budget_saved user=%s period=%04d-%02d", user_id, year, month)
    return budget


async def sum_spent_by_category(db: AsyncSession, user_id: str, year: int, month: int) -> dict[str, float]:
    start, end = month_bounds(year, month)
    result = await db.execute(
        select(Expense.category, func.sum(Expense.amount))
        .where(Expense.user_id == user_id, Expense.date >= start, Expense.date < end)
        .group_by(Expense.category)
    )
    return {category.lower(): float(total or 0) for category, total in result.all()}


async def sum_income(db: AsyncSession, user_id: str, year: int, month: int) -> float:
    start, end = month_bounds(year, month)
    result = await db.execute(
        select(func.coalesce(func.sum(IncomeEntry.amount), 0)).where(
            IncomeEntry.user_id == user_id, IncomeEntry.date >= start, IncomeEntry.date < end
        )
    )
    return float(result.scalar_one())


async def sum_expenses(db: AsyncSession, user_id: str, year: int, month: int) -> float:
    start, end = month_bounds(year, month)
    result = await db.execute(
        select(func.coalesce(func.sum(Expense.amount), 0)).where(
            Expense.user_id == user_id, Expense.date >= start, Expense.date < end
        )
    )
    return float(result.scalar_one())


async def monthly_summary(db: AsyncSession, user_id: str, year: int, month: int) -> list[dict[str, object]]:
    """Income, expenses and net for the six months ending at (year, month), oldest first."""
    months = []
    for offset in range(SUMMARY_MONTHS - 1, -1, -1):
        y, m = shift_month(year, month, -offset)
        income = await sum_income(db, user_id, y, m)
        expenses = await sum_expenses(db, user_id, y, m)
        months.append(
            {
                "month": m,
                "year": y,
                "label": calendar.month_abbr[m],
                "income": income,
                "expenses": expenses,
                "net": income - expenses,
            }
        )
    return months
