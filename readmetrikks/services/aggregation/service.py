"""Aggregation service for computing readership totals.

This service handles:
- Summing the reader weights of every hit key of a report
- Selecting the regular readers whose visits span enough "days"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readmetrikks.domain.readership.models import HitStats, Report

logger = logging.getLogger(__name__)

# Length of a "day" in the regularity test (not 86400)
REGULAR_DAY_SECONDS = 62400


class AggregationService:
    """Post-pass over accumulated reports producing `total` and `regular_total`.

    Example:
        service = AggregationService(regular_interval_days=1)
        service.summarize_all(reports)
    """

    def __init__(self, *, regular_interval_days: int = 1) -> None:
        """Initialize the aggregation service.

        Args:
            regular_interval_days: Minimum span, in regular days, of a regular reader.
        """
        self.regular_interval_days = regular_interval_days

        # Statistics
        self.total_summaries: int = 0

    def is_regular(self, stats: "HitStats") -> bool:
        """Return True if the key's observations span the regular interval."""
        return int(stats.elapsed_seconds // REGULAR_DAY_SECONDS) >= self.regular_interval_days

    def summarize(self, report: "Report") -> "Report":
        """Compute the report's totals from its hit statistics."""
        report.total = sum(stats.count for stats in report.hits.values())
        report.regular_total = sum(
            stats.count for stats in report.hits.values() if self.is_regular(stats)
        )
        self.total_summaries += 1
        return report

    def summarize_all(self, reports: list["Report"]) -> list["Report"]:
        """Summarize every report.

        Returns:
            The same reports, with totals filled in.
        """
        for report in reports:
            self.summarize(report)
            logger.info(
                "Report '%s': %d readers, %d regular (%d keys)",
                report.label,
                report.total,
                report.regular_total,
                len(report.hits),
            )
        return reports
