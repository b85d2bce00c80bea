import gzip
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from readmetrikks.services.logparser.constants import access_log_pattern
from readmetrikks.services.logparser.exceptions import LogSourceError
from readmetrikks.services.logparser.logparser import LogParser
from readmetrikks.services.logparser.schemas import AnalysisWindow, LogRecord, ScanSignal

VALID_LINE = (
    '198.51.100.7 - - [17/Oct/2026:08:15:42 +0200] "GET /blog/post.html HTTP/1.1" 200 5316 '
    '"https://example.org/links" "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) Safari/605.1.15"'
)


@pytest.fixture
def window(now: datetime) -> AnalysisWindow:
    return AnalysisWindow.ending_at(now, 14)


@pytest.fixture
def log_parser(window: AnalysisWindow) -> LogParser:
    """Return a LogParser over a 14 day window."""
    return LogParser(window)


async def collect(parser: LogParser, path: Path) -> list:
    return [item async for item in parser.iter_records(path)]


def test_access_log_pattern_matches_valid_line() -> None:
    """The combined log grammar captures every field."""
    matched = access_log_pattern().match(VALID_LINE)
    assert matched is not None
    assert matched.group("client") == "198.51.100.7"
    assert matched.group("path") == "/blog/post.html"
    assert matched.group("status_code") == "200"


def test_window_ending_at(now: datetime) -> None:
    """Window start is now minus days_to_consider; naive now is taken as UTC."""
    window = AnalysisWindow.ending_at(now, 14)
    assert window.end == now
    assert window.start == now - timedelta(days=14)

    naive = AnalysisWindow.ending_at(datetime(2026, 10, 18, 12, 0, 0), 1)
    assert naive.end.tzinfo is timezone.utc


def test_parse_line(log_parser: LogParser) -> None:
    """A valid combined-format line becomes a timezone-aware LogRecord."""
    record = log_parser.parse_line(VALID_LINE)
    assert isinstance(record, LogRecord)
    assert record.client == "198.51.100.7"
    assert record.path == "/blog/post.html"
    assert record.status_code == 200
    assert record.referrer == "https://example.org/links"
    assert record.user_agent.startswith("Mozilla/5.0 (Macintosh")
    assert record.timestamp == datetime(2026, 10, 17, 6, 15, 42, tzinfo=timezone.utc)
    assert log_parser.parsed_lines_count() == 1


def test_parse_line_common_format(log_parser: LogParser) -> None:
    """Lines without referer and agent parse with empty strings for both."""
    record = log_parser.parse_line(
        '10.0.0.1 - frank [10/Oct/2026:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 304 -'
    )
    assert record is not None
    assert record.referrer == ""
    assert record.user_agent == ""
    assert record.status_code == 304


def test_parse_line_invalid(log_parser: LogParser) -> None:
    """Malformed lines are skipped and counted, blank lines are ignored."""
    assert log_parser.parse_line("not-a-valid-access-log-line") is None
    assert log_parser.parse_line('1.2.3.4 - - [32/Foo/2026:99:00:00 +0000] "GET / HTTP/1.1" 200 1 "-" "x"') is None
    assert log_parser.parse_line("   \n") is None
    assert log_parser.skipped_lines_count() == 2


@pytest.mark.parametrize("status", ["400", "404", "500", "-"])
def test_parse_line_rejects_error_and_missing_status(log_parser: LogParser, status: str) -> None:
    """Error and missing statuses are never counted."""
    line = VALID_LINE.replace('HTTP/1.1" 200', f'HTTP/1.1" {status}')
    assert log_parser.parse_line(line) is None
    assert log_parser.rejected_lines == 1
    assert log_parser.skipped_lines == 0


@pytest.mark.asyncio
async def test_iter_lines_reversed_across_chunks(tmp_path: Path, window: AnalysisWindow) -> None:
    """Lines come out last-first even when they straddle chunk boundaries."""
    log_file = tmp_path / "access.log"
    lines = [f"line number {i} " + "x" * i for i in range(20)]
    log_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    parser = LogParser(window, chunk_size=7)
    read = [line async for line in parser.iter_lines_reversed(log_file)]

    assert [line for line in read if line] == list(reversed(lines))


@pytest.mark.asyncio
async def test_iter_lines_reversed_gzip(tmp_path: Path, log_parser: LogParser) -> None:
    """Gzip sources are decompressed transparently."""
    log_file = tmp_path / "access.log.2.gz"
    log_file.write_bytes(gzip.compress(b"first\nsecond\nthird\n"))

    read = [line async for line in log_parser.iter_lines_reversed(log_file)]

    assert [line for line in read if line] == ["third", "second", "first"]


@pytest.mark.asyncio
async def test_iter_records_end_of_source(
    tmp_path: Path, log_parser: LogParser, now: datetime, make_log_line, write_log
) -> None:
    """All in-window records are yielded newest first, then END_OF_SOURCE."""
    log_file = write_log(tmp_path / "access.log", [
        make_log_line(now - timedelta(days=3), client="10.0.0.1"),
        "garbage",
        make_log_line(now - timedelta(days=2), client="10.0.0.2"),
        make_log_line(now - timedelta(days=1), client="10.0.0.3", status="404"),
        make_log_line(now - timedelta(hours=1), client="10.0.0.4"),
    ])

    items = await collect(log_parser, log_file)

    assert items[-1] is ScanSignal.END_OF_SOURCE
    assert [record.client for record in items[:-1]] == ["10.0.0.4", "10.0.0.2", "10.0.0.1"]
    assert log_parser.skipped_lines == 1
    assert log_parser.rejected_lines == 1


@pytest.mark.asyncio
async def test_iter_records_end_of_window(
    tmp_path: Path, log_parser: LogParser, now: datetime, make_log_line, write_log
) -> None:
    """A record older than the window start ends the scan without being yielded."""
    log_file = write_log(tmp_path / "access.log", [
        make_log_line(now - timedelta(days=30), client="10.0.0.1"),
        make_log_line(now - timedelta(days=15), client="10.0.0.2"),
        make_log_line(now - timedelta(days=13), client="10.0.0.3"),
    ])

    items = await collect(log_parser, log_file)

    assert items[-1] is ScanSignal.END_OF_WINDOW
    assert [record.client for record in items[:-1]] == ["10.0.0.3"]
    # 10.0.0.1 is never read
    assert log_parser.parsed_lines == 2


@pytest.mark.asyncio
async def test_iter_records_rejected_old_record_does_not_end_window(
    tmp_path: Path, log_parser: LogParser, now: datetime, make_log_line, write_log
) -> None:
    """Status filtering happens before the window check."""
    log_file = write_log(tmp_path / "access.log", [
        make_log_line(now - timedelta(days=20), client="10.0.0.1", status="404"),
    ])

    items = await collect(log_parser, log_file)

    assert items == [ScanSignal.END_OF_SOURCE]


@pytest.mark.asyncio
async def test_iter_records_window_start_is_inclusive(
    tmp_path: Path, log_parser: LogParser, window: AnalysisWindow, make_log_line, write_log
) -> None:
    """A record exactly at the window start is still counted."""
    log_file = write_log(tmp_path / "access.log", [make_log_line(window.start)])

    items = await collect(log_parser, log_file)

    assert len(items) == 2
    assert items[0].timestamp == window.start
    assert items[1] is ScanSignal.END_OF_SOURCE


@pytest.mark.asyncio
async def test_iter_records_missing_source(tmp_path: Path, log_parser: LogParser) -> None:
    """An unopenable source is fatal and names the path."""
    missing = tmp_path / "access.log.1"
    with pytest.raises(LogSourceError, match="access.log.1") as excinfo:
        await collect(log_parser, missing)
    assert excinfo.value.source == missing


@pytest.mark.asyncio
async def test_iter_records_corrupt_gzip(tmp_path: Path, log_parser: LogParser) -> None:
    """A gzip source that cannot be decompressed is fatal."""
    broken = tmp_path / "access.log.3.gz"
    broken.write_bytes(b"definitely not gzip data")
    with pytest.raises(LogSourceError):
        await collect(log_parser, broken)
