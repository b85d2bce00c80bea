"""Access log grammar and related constants."""
import re
from functools import lru_cache

TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

COMPRESSED_SUFFIX = ".gz"

# Status codes from this value upwards are never counted
MIN_ERROR_STATUS = 400

READ_CHUNK_SIZE = 64 * 1024


@lru_cache(maxsize=1)
def access_log_pattern() -> re.Pattern[str]:
    """Common/combined log format.

    client ident user [dateandtime] "method path version" status bytes "referrer" "user_agent"
    The referrer and user agent pair is optional (plain common format).
    """
    return re.compile(
        r"""
        ^(?P<client>\S+)\s+
        (?P<ident>\S+)\s+
        (?P<remote_user>\S+)\s+
        \[(?P<dateandtime>[^\]]+)\]\s+
        "(?P<method>[A-Za-z]+)\s+(?P<path>[^\s"]+)(?:\s+(?P<http_version>[^"]*))?"\s+
        (?P<status_code>\d{3}|-)\s+
        (?P<bytes_sent>\d+|-)
        (?:\s+"(?P<referrer>(?:[^"\\]|\\.)*)"\s+"(?P<user_agent>(?:[^"\\]|\\.)*)")?
        """,
        re.VERBOSE,
    )
