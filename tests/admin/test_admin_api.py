"""Admin gate, dashboard queries and feedback."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from moneyglow.auth.dependencies import require_admin
from moneyglow.auth.session import SessionPayload
from moneyglow.db.models import User
from moneyglow.errors import Forbidden, Unauthorized


class TestAdminGate:
    async def test_no_session_is_401(self, client):
        response = await client.get("/api/admin/stats")
        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    async def test_non_admin_is_403(self, authed_client):
        response = await authed_client.get("/api/admin/stats")
        assert response.status_code == 403
        assert response.json() == {"detail": "Forbidden"}

    async def test_revoked_admin_is_403_immediately(self, login, admin_user, db_session):
        client = login(admin_user)
        assert (await client.get("/api/admin/stats")).status_code == 200

        await db_session.execute(update(User).where(User.id == admin_user.id).values(is_admin=False))
        await db_session.commit()
        assert (await client.get("/api/admin/stats")).status_code == 403

    async def test_dependency_returns_session_payload(self, admin_user, user, db_session):
        payload = SessionPayload(user_id=admin_user.id, email=admin_user.email)
        assert await require_admin(payload, db_session) is payload

        with pytest.raises(Forbidden):
            await require_admin(SessionPayload(user_id=user.id, email=user.email), db_session)
        with pytest.raises(Unauthorized):
            await require_admin(SessionPayload(user_id="missing", email="gone@example.com"), db_session)


class TestStats:
    async def test_platform_totals(self, login, admin_user, make_user):
        now = datetime.now(timezone.utc)
        await make_user(email="a@example.com", onboarded=True, quiz_result="YOLO", level=2, xp=150,
                        last_check_in=now - timedelta(days=1))
        await make_user(email="b@example.com", onboarded=True, last_check_in=now - timedelta(days=30))
        await make_user(email="c@example.com")

        data = (await login(admin_user).get("/api/admin/stats")).json()
        assert data["total_users"] == 4
        assert data["onboarded_users"] == 3
        assert data["active_users"] == 1
        # 1 of 3 onboarded users took the quiz
        assert data["quiz_completion_rate"] == 33
        assert data["level_distribution"] == {"1": 3, "2": 1, "3": 0, "4": 0}


class TestUsers:
    async def test_search_and_paging(self, login, admin_user, make_user):
        await make_user(email="bea.vlogs@example.com", name="Bea")
        await make_user(email="carlo@example.com", name="Carlo Bautista")
        await make_user(email="dana@example.com", name="Dana")
        client = login(admin_user)

        found = (await client.get("/api/admin/users", params={"search": "BEA"})).json()
        assert [u["email"] for u in found["users"]] == ["bea.vlogs@example.com"]
        assert found["total"] == 1

        by_name = (await client.get("/api/admin/users", params={"search": "bautista"})).json()
        assert by_name["users"][0]["email"] == "carlo@example.com"

        paged = (await client.get("/api/admin/users", params={"limit": 2, "page": 2})).json()
        assert paged["total"] == 4
        assert len(paged["users"]) == 2

    async def test_limit_capped(self, login, admin_user):
        data = (await login(admin_user).get("/api/admin/users", params={"limit": 500})).json()
        assert data["limit"] == 50

    async def test_user_detail(self, login, admin_user, user):
        client = login(admin_user)
        await client.post("/api/feedback", json={"rating": 1})
        data = (await client.get(f"/api/admin/users/{user.id}")).json()
        assert data["user"]["email"] == user.email
        assert data["counts"]["income_entries"] == 0
        assert data["glow_score"] == 0
        assert len(data["badges"]) == 10

    async def test_user_detail_missing(self, login, admin_user):
        response = await login(admin_user).get("/api/admin/users/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}


class TestFeedback:
    async def test_submit_and_review(self, authed_client, login, admin_user):
        for rating, reason in ((1, "Helpful tip"), (-1, "Too generic"), (-1, None), (0, "")):
            response = await authed_client.post(
                "/api/feedback", json={"rating": rating, "reason": reason, "context": "advice", "page": "/dashboard"}
            )
            assert response.status_code == 200

        data = (await login(admin_user).get("/api/admin/feedback")).json()
        assert data["total"] == 4
        assert data["total_pages"] == 1
        assert data["stats"] == {"positive": 1, "neutral": 1, "negative": 2}
        assert all(row["user"]["email"] == "creator@example.com" for row in data["feedback"])
        assert any(row["reason"] is None for row in data["feedback"])

    async def test_rating_out_of_range(self, authed_client):
        assert (await authed_client.post("/api/feedback", json={"rating": 5})).status_code == 422

    async def test_feedback_requires_session(self, client):
        assert (await client.post("/api/feedback", json={"rating": 1})).status_code == 401
