"""Log source errors."""
from __future__ import annotations

from pathlib import Path


class LogSourceError(OSError):
    """A log source could not be opened or read."""

    def __init__(self, source: Path | str, reason: str) -> None:
        self.source = Path(source)
        self.reason = reason
        super().__init__(f"Cannot read log source {self.source}: {reason}")
