"""Log ingestion service - drives a readership run.

This service orchestrates:
- Reading log sources newest-first via LogParser
- Hit classification via HitClassifier
- Report matching via ReportMatcher
- Per-report accumulation and the final summary via AggregationService

A run stops reading every remaining source as soon as one source reaches
the start of the analysis window.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from contextlib import aclosing
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from readmetrikks.domain.readership.dtos import ReadershipResult, ReportResult
from readmetrikks.domain.readership.models import Report, ReportConfig
from readmetrikks.services.aggregation.service import AggregationService
from readmetrikks.services.classifier.classifier import HitClassifier
from readmetrikks.services.ingestion.sources import discover_log_sources
from readmetrikks.services.logparser.constants import READ_CHUNK_SIZE
from readmetrikks.services.logparser.logparser import LogParser
from readmetrikks.services.logparser.schemas import AnalysisWindow, LogRecord, ScanSignal
from readmetrikks.services.matcher.matcher import ReportMatcher

if TYPE_CHECKING:
    from readmetrikks.config.settings import Settings


logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Counters of a run in progress, published only when the run succeeds."""

    parser: LogParser
    processed: int = 0
    hits: int = 0
    bot_skips: int = 0
    sources_read: int = 0


class LogIngestionService:
    """Runs the readership analysis over an ordered list of log sources.

    Every run starts from empty reports; nothing is kept between runs except
    the last result and run statistics.

    Example:
        service = LogIngestionService(
            reports=[ReportConfig(label="Feed", test_type="path", test="/feed.xml")],
            days_to_consider=14,
            regular_interval_days=1,
        )
        result = await service.run([Path("access.log"), Path("access.log.1")])
    """

    def __init__(
        self,
        reports: list[ReportConfig],
        *,
        days_to_consider: int = 14,
        regular_interval_days: int = 1,
        log_dir: Path | None = None,
        pattern: str = "access.log*",
        order_by: Literal["name", "mtime"] = "name",
        chunk_size: int = READ_CHUNK_SIZE,
        classifier: HitClassifier | None = None,
        matcher: ReportMatcher | None = None,
    ) -> None:
        """Initialize the log ingestion service.

        Args:
            reports: Report definitions, one Report per entry per run.
            days_to_consider: Length of the analysis window in days.
            regular_interval_days: Regularity threshold passed to the aggregation.
            log_dir: Directory scanned by refresh().
            pattern: Glob selecting the log files in log_dir.
            order_by: Source ordering used by refresh().
            chunk_size: Bytes read per backwards step.
            classifier: HitClassifier, a default one is created if omitted.
            matcher: ReportMatcher, a default one is created if omitted.
        """
        self.report_configs: list[ReportConfig] = reports
        self.days_to_consider: int = days_to_consider
        self.log_dir: Path | None = log_dir
        self.pattern: str = pattern
        self.order_by: Literal["name", "mtime"] = order_by
        self.chunk_size: int = chunk_size
        self.classifier: HitClassifier = classifier or HitClassifier()
        self.matcher: ReportMatcher = matcher or ReportMatcher()
        self.aggregation_service = AggregationService(regular_interval_days=regular_interval_days)

        self.parser: LogParser | None = None
        self._lock = asyncio.Lock()

        # Statistics of the last run
        self.total_processed: int = 0
        self.total_hits: int = 0
        self.total_bot_skips: int = 0
        self.sources_read: int = 0
        self.last_run: datetime | None = None
        self.last_result: ReadershipResult | None = None

        for config in self.report_configs:
            self.matcher.check_config(config)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LogIngestionService":
        """Build a service from application settings."""
        return cls(
            reports=settings.readership.reports,
            days_to_consider=settings.readership.days_to_consider,
            regular_interval_days=settings.readership.regular_interval_days,
            log_dir=settings.logs.log_dir,
            pattern=settings.logs.pattern,
            order_by=settings.logs.order_by,
            chunk_size=settings.logs.chunk_size,
        )

    @property
    def is_running(self) -> bool:
        """Return True while a run is in progress."""
        return self._lock.locked()

    def discover_sources(self) -> list[Path]:
        """Return the configured log sources, newest first."""
        if self.log_dir is None:
            raise ValueError("No log directory configured")
        return discover_log_sources(self.log_dir, self.pattern, self.order_by)

    async def refresh(self, now: datetime | None = None) -> ReadershipResult:
        """Discover the configured log sources and run the analysis over them."""
        sources = await asyncio.to_thread(self.discover_sources)
        return await self.run(sources, now=now)

    async def run(
        self, sources: Sequence[Path], now: datetime | None = None
    ) -> ReadershipResult:
        """Analyse the sources and return per-report totals.

        Statistics are committed together with the result, so a failed run
        leaves the previous snapshot and its statistics in place.

        Args:
            sources: Log files ordered newest first.
            now: End of the analysis window. Defaults to the current time.

        Raises:
            LogSourceError: If a source cannot be read.
        """
        async with self._lock:
            window = AnalysisWindow.ending_at(now or datetime.now(timezone.utc), self.days_to_consider)
            state = RunState(parser=LogParser(window, chunk_size=self.chunk_size))
            reports = [Report(config=config) for config in self.report_configs]
            self.classifier.reset_statistics()

            for index, source in enumerate(sources):
                state.sources_read += 1
                if await self._ingest_source(state, source, reports):
                    logger.info(
                        "Window start reached in %s, skipping %d older source(s)",
                        source,
                        len(sources) - index - 1,
                    )
                    break
            state.bot_skips = self.classifier.bot_skips

            self.aggregation_service.summarize_all(reports)

            result = ReadershipResult(
                start=window.start,
                end=window.end,
                reports=[ReportResult.from_report(report) for report in reports],
            )
            self._commit(state, result)

            logger.info(
                "Readership run complete: %d source(s), %d records, %d hits, %d bots (parsed=%d skipped=%d rejected=%d)",
                state.sources_read,
                state.processed,
                state.hits,
                state.bot_skips,
                state.parser.parsed_lines,
                state.parser.skipped_lines,
                state.parser.rejected_lines,
            )
            return result

    def _commit(self, state: RunState, result: ReadershipResult) -> None:
        """Publish a finished run's result and statistics."""
        self.parser = state.parser
        self.total_processed = state.processed
        self.total_hits = state.hits
        self.total_bot_skips = state.bot_skips
        self.sources_read = state.sources_read
        self.last_result = result
        self.last_run = datetime.now(timezone.utc)

    async def _ingest_source(self, state: RunState, source: Path, reports: list[Report]) -> bool:
        """Feed one source into the reports.

        Returns:
            True if the source reached the start of the window.
        """
        async with aclosing(state.parser.iter_records(source)) as records:
            async for item in records:
                if item is ScanSignal.END_OF_WINDOW:
                    return True
                if item is ScanSignal.END_OF_SOURCE:
                    return False
                self._process_record(state, item, reports)
        return False

    def _process_record(self, state: RunState, record: LogRecord, reports: list[Report]) -> None:
        """Classify a record and fold it into every matching report."""
        state.processed += 1

        hit = self.classifier.classify(record)
        if hit is None:
            return

        for report in reports:
            if self.matcher.matches(record, report.config):
                report.record_hit(hit, record.timestamp)
                state.hits += 1

    # Statistics properties for API endpoints
    @property
    def parsed_lines(self) -> int:
        """Return the number of parsed lines of the last run."""
        return self.parser.parsed_lines if self.parser else 0

    @property
    def skipped_lines(self) -> int:
        """Return the number of unparseable lines of the last run."""
        return self.parser.skipped_lines if self.parser else 0

    @property
    def rejected_lines(self) -> int:
        """Return the number of error-status lines of the last run."""
        return self.parser.rejected_lines if self.parser else 0
