"""Shared dependency providers for API layer."""
from __future__ import annotations

from litestar import Request

from readmetrikks.services.ingestion import LogIngestionService


def provide_ingestion_service(request: Request) -> LogIngestionService | None:
    """Provide the LogIngestionService from app state.

    Returns None if the service is not available (startup not run).
    """
    return getattr(request.app.state, "ingestion_service", None)
