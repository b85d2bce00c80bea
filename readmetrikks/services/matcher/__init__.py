"""Report filter matching."""
from .matcher import ReportMatcher

__all__ = ["ReportMatcher"]
