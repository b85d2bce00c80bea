"""Stats API endpoint for readership run statistics."""
from __future__ import annotations

from typing import Any

from litestar import get
from litestar.di import Provide

from readmetrikks.services.ingestion import LogIngestionService
from readmetrikks.api.dependencies import provide_ingestion_service as pis


@get("/stats", dependencies={"ingestion_service": Provide(pis, sync_to_thread=False)})
async def stats(ingestion_service: LogIngestionService | None) -> dict[str, Any]:
    """Get statistics of the last readership run.

    Returns:
        Dictionary with parsing and ingestion statistics.
        Returns zeros if the ingestion service is not available.
    """
    if ingestion_service is None:
        return {
            "total_parsed_lines": 0,
            "total_skipped_lines": 0,
            "total_rejected_lines": 0,
            "total_processed": 0,
            "total_hits": 0,
            "total_bot_skips": 0,
            "sources_read": 0,
            "last_run": None,
            "is_running": False,
        }

    return {
        "total_parsed_lines": ingestion_service.parsed_lines,
        "total_skipped_lines": ingestion_service.skipped_lines,
        "total_rejected_lines": ingestion_service.rejected_lines,
        "total_processed": ingestion_service.total_processed,
        "total_hits": ingestion_service.total_hits,
        "total_bot_skips": ingestion_service.total_bot_skips,
        "sources_read": ingestion_service.sources_read,
        "last_run": ingestion_service.last_run.isoformat() if ingestion_service.last_run else None,
        "is_running": ingestion_service.is_running,
    }
