"""Income, expenses, budgets and insights endpoints."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from moneyglow.db.models import BudgetSnapshot, MonthlyBudget, User
from moneyglow.finance.service import month_bounds, shift_month
from moneyglow.gamification.streak_service import local_day

INCOME = {"source": "YOUTUBE", "type": "Brand deal", "amount": 15000, "date": "2026-03-15T04:00:00Z"}


async def _xp(db, user_id: str) -> int:
    result = await db.execute(select(User.xp).where(User.id == user_id))
    return result.scalar_one()


class TestMonthMath:
    def test_bounds(self):
        start, end = month_bounds(2026, 12)
        assert start == datetime(2026, 12, 1, tzinfo=timezone.utc)
        assert end == datetime(2027, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        ("year", "month", "delta", "expected"),
        [(2026, 3, -5, (2025, 10)), (2026, 1, -1, (2025, 12)), (2026, 12, 1, (2027, 1)), (2026, 6, 0, (2026, 6))],
    )
    def test_shift(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected


class TestIncome:
    async def test_create_awards_xp(self, authed_client, db_session, user):
        response = await authed_client.post("/api/income", json={**INCOME, "note": "Sponsored vlog"})
        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == 15000
        assert body["note"] == "Sponsored vlog"
        assert await _xp(db_session, user.id) == 10

    async def test_list_newest_first(self, authed_client):
        await authed_client.post("/api/income", json={**INCOME, "date": "2026-01-05T00:00:00Z"})
        await authed_client.post("/api/income", json={**INCOME, "date": "2026-02-05T00:00:00Z"})
        entries = (await authed_client.get("/api/income")).json()
        assert [e["date"][:10] for e in entries] == ["2026-02-05", "2026-01-05"]

    async def test_rejects_non_positive_amount(self, authed_client):
        response = await authed_client.post("/api/income", json={**INCOME, "amount": 0})
        assert response.status_code == 422

    async def test_delete_own_entry(self, authed_client):
        entry = (await authed_client.post("/api/income", json=INCOME)).json()
        response = await authed_client.delete(f"/api/income/{entry['id']}")
        assert response.status_code == 200
        assert (await authed_client.get("/api/income")).json() == []

    async def test_cannot_delete_someone_elses(self, authed_client, login, make_user):
        entry = (await authed_client.post("/api/income", json=INCOME)).json()
        login(await make_user(email="other@example.com"))
        response = await authed_client.delete(f"/api/income/{entry['id']}")
        assert response.status_code == 404
        assert response.json() == {"detail": "Not found"}


class TestExpenses:
    async def test_create_and_list_by_month(self, authed_client, db_session, user):
        march = {"category": "NEEDS", "subcategory": "Rent", "amount": 8000, "date": "2026-03-02T03:00:00Z"}
        april = {"category": "WANTS", "subcategory": "Milk tea", "amount": 180, "date": "2026-04-02T03:00:00Z"}
        assert (await authed_client.post("/api/expenses", json=march)).status_code == 201
        assert (await authed_client.post("/api/expenses", json=april)).status_code == 201
        assert await _xp(db_session, user.id) == 10

        listed = (await authed_client.get("/api/expenses", params={"month": 3, "year": 2026})).json()
        assert [e["subcategory"] for e in listed["expenses"]] == ["Rent"]

    async def test_unknown_category(self, authed_client):
        bad = {"category": "LUXURY", "subcategory": "Bag", "amount": 5000, "date": "2026-03-02T03:00:00Z"}
        assert (await authed_client.post("/api/expenses", json=bad)).status_code == 422

    async def test_delete_missing(self, authed_client):
        assert (await authed_client.delete("/api/expenses/nope")).status_code == 404


class TestQuickBudget:
    async def test_snapshot_without_xp(self, authed_client, db_session, user):
        response = await authed_client.post("/api/budget", json={"income": 30000})
        assert response.status_code == 201
        body = response.json()
        assert (body["needs"], body["wants"], body["savings"]) == pytest.approx((15000, 9000, 6000))
        assert await _xp(db_session, user.id) == 0

        history = (await authed_client.get("/api/budget")).json()
        assert len(history) == 1


class TestMonthlyBudget:
    async def test_save_then_replace(self, authed_client, db_session, user):
        first = await authed_client.post("/api/monthly-budget", json={"income": 40000, "month": 3, "year": 2026})
        assert first.status_code == 200
        assert first.json()["xp_awarded"] == 15
        assert first.json()["budget"]["needs"] == 20000

        second = await authed_client.post("/api/monthly-budget", json={"income": 10001, "month": 3, "year": 2026})
        budget = second.json()["budget"]
        assert (budget["needs"], budget["wants"], budget["savings"]) == (5001, 3000, 2000)

        rows = (await db_session.execute(select(func.count(MonthlyBudget.id)))).scalar_one()
        snapshots = (await db_session.execute(select(func.count(BudgetSnapshot.id)))).scalar_one()
        assert rows == 1
        assert snapshots == 2
        assert await _xp(db_session, user.id) == 30

    async def test_view_with_spending(self, authed_client):
        await authed_client.post("/api/monthly-budget", json={"income": 40000, "month": 3, "year": 2026})
        await authed_client.post("/api/income", json=INCOME)
        for expense in (
            {"category": "NEEDS", "subcategory": "Rent", "amount": 8000, "date": "2026-03-02T03:00:00Z"},
            {"category": "NEEDS", "subcategory": "Load", "amount": 500, "date": "2026-03-03T03:00:00Z"},
            {"category": "SAVINGS", "subcategory": "MP2", "amount": 2000, "date": "2026-03-04T03:00:00Z"},
        ):
            await authed_client.post("/api/expenses", json=expense)

        view = (await authed_client.get("/api/monthly-budget", params={"month": 3, "year": 2026})).json()
        assert view["budget"]["income"] == 40000
        assert view["spent"] == {"needs": 8500, "wants": 0, "savings": 2000, "total": 10500}
        assert view["tracked_income"] == 15000

    async def test_empty_month(self, authed_client):
        view = (await authed_client.get("/api/monthly-budget", params={"month": 7, "year": 2026})).json()
        assert view["budget"] is None
        assert view["spent"]["total"] == 0


class TestInsights:
    async def test_monthly_summary_six_months(self, authed_client):
        today = local_day(datetime.now(timezone.utc))
        mid_month = datetime(today.year, today.month, 15, 4, tzinfo=timezone.utc).isoformat()
        await authed_client.post("/api/income", json={**INCOME, "date": mid_month, "amount": 20000})
        await authed_client.post(
            "/api/expenses",
            json={"category": "WANTS", "subcategory": "Concert", "amount": 5000, "date": mid_month},
        )

        months = (await authed_client.get("/api/insights/monthly-summary")).json()["months"]
        assert len(months) == 6
        assert (months[-1]["year"], months[-1]["month"]) == (today.year, today.month)
        assert months[-1]["net"] == 15000
        assert all(m["income"] == 0 for m in months[:-1])
        earliest = shift_month(today.year, today.month, -5)
        assert (months[0]["year"], months[0]["month"]) == earliest

    async def test_tax_estimate(self, authed_client):
        data = (await authed_client.get("/api/insights/tax-estimate", params={"gross": 1_000_000})).json()
        assert data["recommended"] == "flat8"
        assert data["flat8"] == pytest.approx(60000)
        assert data["graduated"]["total"] == pytest.approx(92500)

    async def test_tax_estimate_rejects_negative(self, authed_client):
        response = await authed_client.get("/api/insights/tax-estimate", params={"gross": -1})
        assert response.status_code == 422

    async def test_compound(self, authed_client):
        data = (await authed_client.get("/api/insights/compound", params={"monthly": 1000, "years": 2})).json()
        assert data["annual_rate"] == 6
        assert data["total_deposited"] == 24000
        assert len(data["breakdown"]) == 2

    async def test_insights_require_session(self, client):
        assert (await client.get("/api/insights/compound", params={"monthly": 1, "years": 1})).status_code == 401
