"""Agent string patterns used to classify hits.

All patterns are case-sensitive.
"""
import re
from functools import lru_cache

# "Feedly/1.0 (+http://www.feedly.com/fetcher.html; 37 subscribers; )"
SUBSCRIBER_PATTERN = r"^(?P<prefix>.*?)\b(?P<count>\d+) (?:subscriber|reader)"

# Separators trimmed from the end of an aggregator key
KEY_TRAILING_CHARS = " \t(;,"

GENERIC_BOT_PATTERNS: list[str] = [
    r"bot\b",
    r"Bot\b",
    r"[Cc]rawler",
    r"[Ss]pider",
    r"[Ff]etcher",
]

KNOWN_BOT_NAMES: list[str] = [
    r"Googlebot",
    r"bingbot",
    r"Baiduspider",
    r"YandexBot",
    r"Slurp",
    r"DuckDuckBot",
    r"facebookexternalhit",
    r"ia_archiver",
    r"Feedfetcher-Google",
    r"FeedBurner",
    r"Superfeedr",
    r"Feedbin",
    r"NewsBlur",
    r"Inoreader",
    r"UptimeRobot",
    r"curl/",
    r"Wget/",
    r"python-requests",
    r"Go-http-client",
    r"libwww-perl",
]

BOT_PATTERNS: list[str] = GENERIC_BOT_PATTERNS + KNOWN_BOT_NAMES


@lru_cache(maxsize=1)
def subscriber_pattern() -> re.Pattern[str]:
    return re.compile(SUBSCRIBER_PATTERN)


def compile_bot_patterns(patterns: list[str]) -> tuple[re.Pattern[str], ...]:
    """Compile bot patterns once, keeping their order."""
    return tuple(re.compile(pattern) for pattern in patterns)
