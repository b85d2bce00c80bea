"""Schemas for parsed log data - pure data, no I/O."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum


@dataclass(frozen=True)
class LogRecord:
    """One parsed access log line."""

    timestamp: datetime
    status_code: int
    client: str
    user_agent: str
    path: str
    referrer: str


class ScanSignal(Enum):
    """Control values closing a source's record stream."""

    END_OF_WINDOW = "end_of_window"
    END_OF_SOURCE = "end_of_source"


@dataclass(frozen=True)
class AnalysisWindow:
    """Trailing interval of log entries considered by a run."""

    start: datetime
    end: datetime

    @classmethod
    def ending_at(cls, now: datetime, days_to_consider: int) -> "AnalysisWindow":
        """Build the window `[now - days_to_consider, now]`."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return cls(start=now - timedelta(days=days_to_consider), end=now)

    def is_before_start(self, timestamp: datetime) -> bool:
        return timestamp < self.start
