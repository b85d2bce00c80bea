"""Log source discovery and ordering."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal

from readmetrikks.services.logparser.exceptions import LogSourceError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def natural_key(path: Path) -> list[int | str]:
    """Sort key comparing digit runs numerically (access.log.2 < access.log.10)."""
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(path.name)]


def discover_log_sources(
    log_dir: Path,
    pattern: str = "access.log*",
    order_by: Literal["name", "mtime"] = "name",
) -> list[Path]:
    """List the log files of `log_dir` newest-first.

    Args:
        log_dir: Directory holding the log and its rotations.
        pattern: Glob selecting the log files.
        order_by: "name" sorts by rotation suffix (access.log, access.log.1, ...),
            "mtime" sorts by modification time, newest first.

    Raises:
        LogSourceError: If log_dir is not a readable directory.
    """
    if not log_dir.is_dir():
        raise LogSourceError(log_dir, "not a directory")

    try:
        files = [path for path in log_dir.glob(pattern) if path.is_file()]
    except OSError as e:
        raise LogSourceError(log_dir, str(e)) from e

    if order_by == "mtime":
        files.sort(key=lambda path: path.stat().st_mtime, reverse=True)
    else:
        files.sort(key=natural_key)

    logger.debug("Discovered %d log source(s) in %s: %s", len(files), log_dir, [f.name for f in files])
    return files
