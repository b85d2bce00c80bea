from __future__ import annotations

import logging
from dataclasses import dataclass

from readmetrikks.services.logparser.schemas import LogRecord

from .constants import (
    BOT_PATTERNS,
    KEY_TRAILING_CHARS,
    compile_bot_patterns,
    subscriber_pattern,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hit:
    """A counted request: the key readership is accumulated under and its reader weight."""

    key: str
    weight: int


class HitClassifier:
    """Decides whether a record is counted, under which key and with what weight.

    Aggregators that report "<n> subscribers" or "<n> readers" in their agent
    string are counted as n readers keyed by the agent prefix, even though
    they are automated. Everything else is one reader per client address,
    unless the agent string looks like a bot.
    """

    def __init__(self, bot_patterns: list[str] | None = None) -> None:
        self.bot_patterns = compile_bot_patterns(BOT_PATTERNS if bot_patterns is None else bot_patterns)

        # Statistics
        self.aggregator_hits: int = 0
        self.human_hits: int = 0
        self.bot_skips: int = 0

    def reset_statistics(self) -> None:
        """Zero the per-run counters."""
        self.aggregator_hits = 0
        self.human_hits = 0
        self.bot_skips = 0

    def match_bot(self, user_agent: str) -> str | None:
        """Return the first bot pattern matching the agent string, if any."""
        for pattern in self.bot_patterns:
            if pattern.search(user_agent):
                return pattern.pattern
        return None

    def classify(self, record: LogRecord) -> Hit | None:
        """Classify a record. None means the record is not counted."""
        if matched := subscriber_pattern().search(record.user_agent):
            weight = int(matched.group("count"))
            if weight < 1:
                logger.debug("Skipping aggregator reporting no readers: '%s'", record.user_agent)
                return None
            self.aggregator_hits += 1
            return Hit(key=matched.group("prefix").rstrip(KEY_TRAILING_CHARS), weight=weight)

        if bot := self.match_bot(record.user_agent):
            logger.debug("Skipping bot %s (pattern %s): '%s'", record.client, bot, record.user_agent)
            self.bot_skips += 1
            return None

        self.human_hits += 1
        return Hit(key=record.client, weight=1)
