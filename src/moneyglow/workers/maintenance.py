"""Maintenance arq worker: nightly cleanup jobs.

Run with: arq moneyglow.workers.maintenance.MaintenanceWorkerSettings
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import RedisSettings
from sqlalchemy.ext.asyncio import AsyncSession

from moneyglow.auth.service import purge_magic_links
from moneyglow.config import get_settings
from moneyglow.database import close_db, get_session, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _db_session() -> AsyncIterator[AsyncSession]:
    """Database session for one job. Closed (and rolled back if uncommitted) on exit."""
    sessions = get_session()
    session = await anext(sessions)
    try:
        yield session
    finally:
        await sessions.aclose()


async def maintenance_startup(ctx: dict) -> None:  # type: ignore[type-arg]
    settings = get_settings()
    await init_db(settings.database_url)
    logger.info("Maintenance worker started")


async def maintenance_shutdown(ctx: dict) -> None:  # type: ignore[type-arg]
    await close_db()
    logger.info("Maintenance worker shut down")


async def purge_stale_magic_links(ctx: dict) -> int:  # type: ignore[type-arg]
    """Scheduled task: drop magic links past the retention window (daily 03:00 UTC)."""
    async with _db_session() as db:
        deleted = await purge_magic_links(db)
        await db.commit()
    return deleted


class MaintenanceWorkerSettings:
    """arq worker settings for housekeeping jobs."""

    functions = [purge_stale_magic_links]
    cron_jobs = [cron(purge_stale_magic_links, hour={3}, minute={0}, run_at_startup=False)]
    on_startup = maintenance_startup
    on_shutdown = maintenance_shutdown
    redis_settings = RedisSettings.from_dsn(get_settings().redis_url)
    max_jobs = 2
