from collections.abc import AsyncGenerator
from contextlib import aclosing
import gzip
import os
import logging
import zlib
from datetime import datetime
from pathlib import Path

import aiofiles

from .constants import (
    access_log_pattern,
    COMPRESSED_SUFFIX,
    MIN_ERROR_STATUS,
    READ_CHUNK_SIZE,
    TIMESTAMP_FORMAT,
)
from .exceptions import LogSourceError
from .schemas import AnalysisWindow, LogRecord, ScanSignal


logger = logging.getLogger(__name__)


class LogParser:
    """Reads access logs newest-first and parses them into LogRecords.

    This module handles:
    - Reading plain log files backwards in chunks
    - Transparently decompressing gzip rotated logs
    - Validating log lines against the combined log format
    - Dropping error responses and signalling the end of the analysis window
    """

    def __init__(
        self,
        window: AnalysisWindow,
        chunk_size: int = READ_CHUNK_SIZE,
    ) -> None:
        """
        Args:
            window (AnalysisWindow): Records older than window.start end the scan.
            chunk_size (int, optional): Bytes read per backwards step. Defaults to 64 KiB.
        """
        self.window = window
        self.chunk_size = chunk_size

        # Statistics
        self.parsed_lines: int = 0
        self.skipped_lines: int = 0
        self.rejected_lines: int = 0

        logger.debug("Analysis window: %s - %s", window.start, window.end)

    def parsed_lines_count(self) -> int:
        """Return the number of parsed lines."""
        return self.parsed_lines

    def skipped_lines_count(self) -> int:
        """Return the number of unparseable lines."""
        return self.skipped_lines

    def parse_line(self, log_line: str) -> LogRecord | None:
        """Parse a raw log line.

        Returns None for blank or malformed lines and for records whose
        status is missing or an error (>= 400).
        """
        raw_line = log_line.strip()
        if not raw_line:
            return None

        matched = access_log_pattern().match(raw_line)
        if not matched:
            logger.debug("Skipping unmatched line: '%s'", raw_line)
            self.skipped_lines += 1
            return None

        datadict: dict[str, str | None] = matched.groupdict()

        try:
            ts = datetime.strptime(datadict["dateandtime"] or "", TIMESTAMP_FORMAT)
        except ValueError:
            logger.debug("Skipping line with invalid timestamp: '%s'", raw_line)
            self.skipped_lines += 1
            return None

        status_code_str = datadict.get("status_code")
        if not status_code_str or status_code_str == "-":
            self.rejected_lines += 1
            return None
        status_code = int(status_code_str)
        if status_code >= MIN_ERROR_STATUS:
            self.rejected_lines += 1
            return None

        self.parsed_lines += 1
        return LogRecord(
            timestamp=ts,
            status_code=status_code,
            client=datadict["client"] or "",
            user_agent=datadict.get("user_agent") or "",
            path=datadict["path"] or "",
            referrer=datadict.get("referrer") or "",
        )

    @staticmethod
    def _decode(line: bytes) -> str:
        return line.decode("utf-8", errors="replace")

    async def _read_compressed(self, log_path: Path) -> bytes:
        """Read and decompress a whole gzip file."""
        try:
            async with aiofiles.open(log_path, "rb") as file:
                data = await file.read()
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise LogSourceError(log_path, str(e)) from e

    async def iter_lines_reversed(self, log_path: Path) -> AsyncGenerator[str, None]:
        """Async generator yielding the raw lines of a log file, last line first.

        Plain files are read backwards from the end in `chunk_size` steps so a
        scan that stops early never touches the older part of the file. Gzip
        files cannot be read backwards, so a `.gz` source is read and
        decompressed entirely in memory before its lines are walked.
        """
        log_path = Path(log_path)

        if log_path.name.endswith(COMPRESSED_SUFFIX):
            data = await self._read_compressed(log_path)
            for line in reversed(data.split(b"\n")):
                yield self._decode(line)
            return

        try:
            async with aiofiles.open(log_path, "rb") as file:
                position: int = await file.seek(0, os.SEEK_END)
                remainder = b""
                while position > 0:
                    size = min(self.chunk_size, position)
                    position -= size
                    await file.seek(position)
                    block = await file.read(size) + remainder
                    lines = block.split(b"\n")
                    # The first piece may be the tail of a line that starts in the previous chunk
                    remainder = lines.pop(0)
                    for line in reversed(lines):
                        yield self._decode(line)
                yield self._decode(remainder)
        except OSError as e:
            raise LogSourceError(log_path, str(e)) from e

    async def iter_records(
        self, log_path: Path
    ) -> AsyncGenerator[LogRecord | ScanSignal, None]:
        """Async generator yielding in-window records of one source, newest first.

        Yields:
            LogRecord for each counted line inside the window.
            ScanSignal.END_OF_WINDOW, then stops, when a record predates the window.
            ScanSignal.END_OF_SOURCE when the source is exhausted.
        """
        logger.info("Scanning log source %s", log_path)

        async with aclosing(self.iter_lines_reversed(log_path)) as lines:
            async for line in lines:
                record = self.parse_line(line)
                if record is None:
                    continue
                if self.window.is_before_start(record.timestamp):
                    logger.info(
                        "Reached window start in %s (record at %s)", log_path, record.timestamp
                    )
                    yield ScanSignal.END_OF_WINDOW
                    return
                yield record

        yield ScanSignal.END_OF_SOURCE
