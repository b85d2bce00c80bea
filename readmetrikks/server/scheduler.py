"""APScheduler configuration and scheduled job definitions.

This module configures the AsyncIOScheduler from APScheduler 3.x and defines
the periodic readership refresh.
"""

from __future__ import annotations

import logging
from datetime import timezone
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from readmetrikks.config.settings import Settings
    from readmetrikks.services.ingestion import LogIngestionService

logger = logging.getLogger(__name__)


async def refresh_readership_job(ingestion_service: "LogIngestionService") -> None:
    """Recompute the readership snapshot.

    A failed run is logged and the previous snapshot is kept.

    Args:
        ingestion_service: Service holding the report configuration and last result.
    """
    if ingestion_service.is_running:
        logger.info("Readership run already in progress, skipping scheduled refresh")
        return
    try:
        result = await ingestion_service.refresh()
    except Exception as e:
        logger.exception("Scheduled readership refresh failed: %s", e)
        return

    logger.info(
        "Completed readership refresh for window %s - %s (%d reports)",
        result.start,
        result.end,
        len(result.reports),
    )


def create_scheduler(
    ingestion_service: "LogIngestionService",
    settings: "Settings",
) -> AsyncIOScheduler:
    """Create and configure the APScheduler instance.

    Args:
        ingestion_service: Service refreshed by the scheduled job.
        settings: Application settings for job configuration.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    scheduler = AsyncIOScheduler(timezone=timezone.utc)

    if not settings.scheduler.enabled:
        logger.info("Scheduler disabled via settings")
        return scheduler

    scheduler.add_job(
        refresh_readership_job,
        IntervalTrigger(
            minutes=settings.scheduler.refresh_interval_minutes,
        ),
        id="readership-refresh",
        name="Refresh readership snapshot",
        args=[ingestion_service],
        replace_existing=True,
        max_instances=1,
    )
    logger.info(
        "Scheduled readership refresh every %d minute(s)",
        settings.scheduler.refresh_interval_minutes,
    )

    return scheduler
