"""Readership API endpoints."""
from __future__ import annotations

import asyncio

from litestar import Controller, get, post
from litestar.di import Provide
from litestar.exceptions import NotFoundException, ServiceUnavailableException
from litestar.status_codes import HTTP_200_OK

from readmetrikks.api.dependencies import provide_ingestion_service
from readmetrikks.domain.readership.dtos import ReadershipResponse
from readmetrikks.services.ingestion import LogIngestionService
from readmetrikks.services.logparser.exceptions import LogSourceError


def _require_service(ingestion_service: LogIngestionService | None) -> LogIngestionService:
    if ingestion_service is None:
        raise ServiceUnavailableException(detail="Ingestion service is not available")
    return ingestion_service


def _to_response(ingestion_service: LogIngestionService) -> ReadershipResponse:
    if ingestion_service.last_result is None:
        raise NotFoundException(detail="No readership snapshot available yet")
    return ReadershipResponse.from_result(
        ingestion_service.last_result,
        sources_read=ingestion_service.sources_read,
        records_processed=ingestion_service.total_processed,
    )


class ReadershipController(Controller):
    """Readership endpoints

    Serves the latest readership snapshot and triggers recomputation.
    """
    path = "/api/v1/readership"
    tags = ["Readership"]

    dependencies = {
        "ingestion_service": Provide(provide_ingestion_service, sync_to_thread=False),
    }

    @get("/", description="Latest per-report readership totals.")
    async def get_readership(
        self,
        ingestion_service: LogIngestionService | None,
    ) -> ReadershipResponse:
        """Return the latest readership snapshot."""
        return _to_response(_require_service(ingestion_service))

    @post("/refresh", status_code=HTTP_200_OK, description="Recompute readership now.")
    async def refresh_readership(
        self,
        ingestion_service: LogIngestionService | None,
    ) -> ReadershipResponse:
        """Run the analysis over the configured log sources and return the new snapshot."""
        service = _require_service(ingestion_service)
        try:
            await service.refresh()
        except LogSourceError as e:
            raise ServiceUnavailableException(detail=str(e)) from e
        return _to_response(service)

    @get("/sources", description="Log sources in the order they are read.")
    async def list_sources(
        self,
        ingestion_service: LogIngestionService | None,
    ) -> list[str]:
        """List the log files a refresh would read, newest first."""
        service = _require_service(ingestion_service)
        try:
            sources = await asyncio.to_thread(service.discover_sources)
        except LogSourceError as e:
            raise ServiceUnavailableException(detail=str(e)) from e
        return [str(source) for source in sources]
