"""Shared test fixtures.

Tests run against in-memory SQLite with no Redis, so rate limiting and the
magic-link resend cooldown are off.
"""

from __future__ import annotations

import os

os.environ["MG_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MG_SESSION_SECRET"] = "test-session-secret"
os.environ["MG_LOG_FORMAT"] = "console"
os.environ["MG_ANTHROPIC_API_KEY"] = ""

from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable, Sequence  # noqa: E402
from datetime import date  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from moneyglow.auth.session import SessionPayload, create_session  # noqa: E402
from moneyglow.coach.client import ChatTurn, CoachClient  # noqa: E402
from moneyglow.config import get_settings  # noqa: E402
from moneyglow.database import close_db, get_engine, get_session, init_db  # noqa: E402
from moneyglow.db.base import Base  # noqa: E402
from moneyglow.db.models import User  # noqa: E402
from moneyglow.email.service import EmailService  # noqa: E402
from moneyglow.main import create_app  # noqa: E402

get_settings.cache_clear()


class FakeCoach(CoachClient):
    """Coach with canned replies; records what it was asked."""

    def __init__(self) -> None:
        super().__init__(api_key="", model="test-model", client=MagicMock())
        self.advice_calls = 0
        self.chat_history: list[ChatTurn] = []

    async def daily_advice(self, user: User, day: date) -> str:
        self.advice_calls += 1
        return "Set aside 20% of every brand deal before you spend any of it."

    async def quiz_challenge(self, user: User, quiz_result: str) -> str:
        return f"## Your 30-day {quiz_result} challenge\n\n**Week 1:** Track every peso."

    async def stream_chat(self, user: User, history: Sequence[ChatTurn], message: str) -> AsyncIterator[str]:
        self.chat_history = list(history)
        for chunk in ("Hi! ", "Start with ", "a budget."):
            yield chunk

    async def close(self) -> None:
        return None


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory schema per test."""
    get_settings.cache_clear()
    await init_db(get_settings().database_url)
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await close_db()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for setup and assertions."""
    async for session in get_session():
        yield session
        break


@pytest.fixture
def coach() -> FakeCoach:
    return FakeCoach()


@pytest_asyncio.fixture
async def app(db_engine: AsyncEngine, coach: FakeCoach, mock_email_service: MagicMock) -> FastAPI:
    """App with the clients the lifespan would build swapped for fakes."""
    application = create_app()
    application.state.coach = coach
    application.state.mailer = mock_email_service
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app. No lifespan: the DB is already initialized."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_email_service() -> MagicMock:
    """Mailer double installed on the app; records every send."""
    mock_service = MagicMock(spec=EmailService)
    mock_service.send_template = AsyncMock(return_value=True)
    mock_service.send_email = AsyncMock(return_value=True)
    return mock_service


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory: ``await make_user(email=..., xp=..., ...)`` persists and returns a User."""

    async def _make(email: str = "creator@example.com", **fields: object) -> User:
        fields.setdefault("income_sources", [])
        user = User(email=email, **fields)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


def session_cookie(user: User) -> str:
    token = create_session(SessionPayload(user_id=user.id, email=user.email))
    return f"{get_settings().session_cookie_name}={token}"


@pytest.fixture
def login(client: AsyncClient) -> Callable[[User], AsyncClient]:
    """Sign ``client`` in as the given user."""

    def _login(user: User) -> AsyncClient:
        client.headers["Cookie"] = session_cookie(user)
        return client

    return _login


@pytest_asyncio.fixture
async def user(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user(
        email="creator@example.com",
        name="Bea",
        onboarded=True,
        income_sources=["YOUTUBE", "TIKTOK"],
        monthly_income=40000,
    )


@pytest_asyncio.fixture
async def authed_client(login: Callable[[User], AsyncClient], user: User) -> AsyncClient:
    return login(user)


@pytest_asyncio.fixture
async def admin_user(make_user: Callable[..., Awaitable[User]]) -> User:
    return await make_user(email="admin@moneyglow.ph", name="Admin", onboarded=True, is_admin=True)
