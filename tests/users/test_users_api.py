"""Onboarding and profile endpoints."""

ONBOARDING = {
    "name": "Bea",
    "age": 22,
    "income_sources": ["YOUTUBE", "SHOPEE_AFFILIATE"],
    "monthly_income": 35000,
    "financial_goal": "SAVE_EMERGENCY_FUND",
    "employment_status": "FULL_TIME_CREATOR",
    "language_pref": "TAGLISH",
}


class TestOnboarding:
    async def test_completes_profile_and_sends_welcome(self, login, make_user, mock_email_service):
        client = login(await make_user(email="new@example.com"))
        response = await client.post("/api/user/onboarding", json=ONBOARDING)
        assert response.status_code == 200
        data = response.json()
        assert data["onboarded"] is True
        assert data["financial_goal"] == "SAVE_EMERGENCY_FUND"
        assert data["language_pref"] == "TAGLISH"
        assert data["income_sources"] == ["YOUTUBE", "SHOPEE_AFFILIATE"]

        to, template, context = mock_email_service.send_template.await_args.args
        assert (to, template) == ("new@example.com", "welcome")
        assert context["name"] == "Bea"
        assert context["dashboard_url"].endswith("/dashboard")

    async def test_welcome_failure_does_not_fail_onboarding(self, login, make_user, mock_email_service):
        mock_email_service.send_template.return_value = False
        client = login(await make_user(email="new@example.com"))
        response = await client.post("/api/user/onboarding", json=ONBOARDING)
        assert response.status_code == 200

    async def test_validation(self, authed_client, mock_email_service):
        response = await authed_client.post("/api/user/onboarding", json={**ONBOARDING, "age": 9})
        assert response.status_code == 422
        response = await authed_client.post("/api/user/onboarding", json={**ONBOARDING, "income_sources": []})
        assert response.status_code == 422

    async def test_next_login_redirects_to_dashboard(self, client, login, make_user, mock_email_service):
        login(await make_user(email="new@example.com"))
        await client.post("/api/user/onboarding", json=ONBOARDING)
        del client.headers["Cookie"]

        await client.post("/api/auth/send-magic-link", json={"email": "new@example.com"})
        magic_url = mock_email_service.send_template.await_args.args[2]["magic_url"]
        token = magic_url.split("token=", 1)[1]
        verified = await client.get("/api/auth/verify", params={"token": token})
        assert verified.json()["redirect_to"] == "/dashboard"


class TestProfile:
    async def test_get(self, authed_client, user):
        data = (await authed_client.get("/api/user/profile")).json()
        assert data["id"] == user.id
        assert data["income_sources"] == ["YOUTUBE", "TIKTOK"]

    async def test_partial_update(self, authed_client):
        response = await authed_client.put(
            "/api/user/profile", json={"monthly_income": 52000, "debt_situation": "CREDIT_CARD"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_income"] == 52000
        assert data["debt_situation"] == "CREDIT_CARD"
        assert data["name"] == "Bea"

    async def test_null_clears_optional_answers_only(self, authed_client):
        await authed_client.put("/api/user/profile", json={"debt_situation": "CREDIT_CARD"})
        data = (await authed_client.put("/api/user/profile", json={"debt_situation": None, "name": None})).json()
        assert data["debt_situation"] is None
        assert data["name"] == "Bea"
