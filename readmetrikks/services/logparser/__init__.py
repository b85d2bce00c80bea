"""Log parser module - reading and parsing only, no aggregation."""
from .exceptions import LogSourceError
from .logparser import LogParser
from .schemas import AnalysisWindow, LogRecord, ScanSignal

__all__ = ["LogParser", "LogSourceError", "AnalysisWindow", "LogRecord", "ScanSignal"]
