"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from moneyglow.admin.router import feedback_router
from moneyglow.admin.router import router as admin_router
from moneyglow.auth.router import router as auth_router
from moneyglow.coach.client import CoachClient
from moneyglow.coach.router import router as coach_router
from moneyglow.config import get_settings
from moneyglow.database import close_db, init_db
from moneyglow.email.service import EmailService
from moneyglow.finance.router import router as finance_router
from moneyglow.gamification.router import router as gamification_router
from moneyglow.health.router import router as health_router
from moneyglow.middleware import setup_middleware
from moneyglow.redis_client import close_redis, get_optional_redis, init_redis
from moneyglow.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    app.state.mailer = EmailService(redis=get_optional_redis())

    app.state.coach = CoachClient.from_settings(settings)
    if not app.state.coach.configured:
        logger.warning("coach_not_configured")

    yield

    await app.state.coach.close()
    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MoneyGlow API",
        description="Backend API for MoneyGlow: money tracking and gamified habits for young Filipino creators",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(gamification_router)
    app.include_router(finance_router)
    app.include_router(coach_router)
    app.include_router(feedback_router)
    app.include_router(admin_router)

    return app


app = create_app()
