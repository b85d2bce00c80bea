"""Services layer - log reading, classification and readership aggregation."""
from .logparser import LogParser
from .ingestion import LogIngestionService

__all__ = ["LogParser", "LogIngestionService"]
