"""Application lifecycle hooks for startup and shutdown."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from readmetrikks.config.settings import get_settings
from readmetrikks.services.ingestion import LogIngestionService
from readmetrikks.server.scheduler import create_scheduler

if TYPE_CHECKING:
    from litestar import Litestar

logger = logging.getLogger(__name__)


async def on_startup(app: "Litestar") -> None:
    """Create the ingestion service, compute a first snapshot and start the scheduler.

    - If the first run fails (missing log directory, unreadable file), start the
      API without a snapshot instead of failing app startup.
    """
    settings = get_settings()

    ingestion_service = LogIngestionService.from_settings(settings)
    app.state.ingestion_service = ingestion_service

    try:
        await ingestion_service.refresh()
    except Exception as e:
        logger.exception("Initial readership run failed: %s", e)

    scheduler: AsyncIOScheduler = create_scheduler(ingestion_service, settings)
    if settings.scheduler.enabled:
        scheduler.start()
        logger.info("Started APScheduler")
    app.state.scheduler = scheduler


async def on_shutdown(app: "Litestar") -> None:
    """Stop the scheduler."""
    scheduler: AsyncIOScheduler | None = getattr(app.state, "scheduler", None)
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Stopped APScheduler")
