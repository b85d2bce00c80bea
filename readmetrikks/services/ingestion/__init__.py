from .service import LogIngestionService
from .sources import discover_log_sources

__all__ = ["LogIngestionService", "discover_log_sources"]
