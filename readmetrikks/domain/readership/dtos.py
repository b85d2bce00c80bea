"""DTOs for readership results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from readmetrikks.domain.readership.models import Report


@dataclass
class ReportResult:
    """Externally visible totals of one report."""

    label: str
    total: int
    regular_total: int

    @classmethod
    def from_report(cls, report: Report) -> "ReportResult":
        return cls(label=report.label, total=report.total, regular_total=report.regular_total)


@dataclass
class ReadershipResult:
    """Totals for every report plus the analysis window they cover."""

    start: datetime
    end: datetime
    reports: list[ReportResult] = field(default_factory=list)


@dataclass
class ReadershipResponse:
    """Readership snapshot as served by the API."""

    start: str  # ISO format string for JSON serialization
    end: str
    reports: list[ReportResult]
    sources_read: int
    records_processed: int

    @classmethod
    def from_result(
        cls, result: ReadershipResult, *, sources_read: int, records_processed: int
    ) -> "ReadershipResponse":
        return cls(
            start=result.start.isoformat(),
            end=result.end.isoformat(),
            reports=list(result.reports),
            sources_read=sources_read,
            records_processed=records_processed,
        )
