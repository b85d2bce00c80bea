from __future__ import annotations

import logging
import re
from collections.abc import Callable

from readmetrikks.domain.readership.models import PATH_TEST, ReportConfig
from readmetrikks.services.logparser.schemas import LogRecord

logger = logging.getLogger(__name__)


_REGEX_FIELDS: dict[str, Callable[[LogRecord], str]] = {
    "path_regex": lambda record: record.path,
    "referer_regex": lambda record: record.referrer,
    "agent_regex": lambda record: record.user_agent,
}


class ReportMatcher:
    """Matches log records against report filters.

    Regex tests are compiled in free-spacing mode (re.VERBOSE) and cached per
    pattern. Unknown test types never match.
    """

    def __init__(self) -> None:
        self._compiled: dict[str, re.Pattern[str]] = {}
        self._warned_types: set[str] = set()

    def compile(self, test: str) -> re.Pattern[str]:
        if (pattern := self._compiled.get(test)) is None:
            pattern = self._compiled[test] = re.compile(test, re.VERBOSE)
        return pattern

    def check_config(self, config: ReportConfig) -> bool:
        """Return False, warning once per type, if the report can never match."""
        if config.test_type == PATH_TEST or config.test_type in _REGEX_FIELDS:
            return True
        if config.test_type not in self._warned_types:
            self._warned_types.add(config.test_type)
            logger.warning(
                "Unknown test_type '%s' in report '%s'. The report will never match.",
                config.test_type,
                config.label,
            )
        return False

    def matches(self, record: LogRecord, config: ReportConfig) -> bool:
        if config.test_type == PATH_TEST:
            return record.path == config.test
        if (field := _REGEX_FIELDS.get(config.test_type)) is None:
            return False
        return self.compile(config.test).search(field(record)) is not None
