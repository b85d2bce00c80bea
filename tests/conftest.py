import gzip
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Fixed end of the analysis window used by the run tests
NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

BROWSER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:130.0) Gecko/20100101 Firefox/130.0"


@pytest.fixture(scope="session", autouse=True)
def baseline_settings_env():
    """Provide baseline env vars so tests are not affected by local .env.

    Pydantic-settings precedence: init args > env vars > .env > defaults.
    Setting these ensures stable defaults regardless of any .env present.
    """
    os.environ.update({
        # App
        "APP_NAME": "ReadMetrikks API",
        "APP_VERSION": "0.1.0",
        "APP_DEBUG": "false",
        "APP_ENVIRONMENT": "development",
        # API
        "API_HOST": "0.0.0.0",
        "API_PORT": "8000",
        "API_WORKERS": "1",
        "API_RELOAD": "false",
        "API_LOG_LEVEL": "INFO",
        # Readership
        "READERSHIP_REGULAR_INTERVAL_DAYS": "1",
        "READERSHIP_DAYS_TO_CONSIDER": "14",
        "READERSHIP_REPORTS": "[]",
        # Log sources
        "LOGS_LOG_DIR": "/var/log/nginx",
        "LOGS_PATTERN": "access.log*",
        "LOGS_ORDER_BY": "name",
        # Scheduler
        "SCHEDULER_ENABLED": "false",
        "SCHEDULER_REFRESH_INTERVAL_MINUTES": "60",
    })


@pytest.fixture(autouse=True)
def refresh_settings_cache():
    """Clear settings cache so env changes take effect per test.

    Ensures tests using monkeypatch.setenv() get a fresh Settings instance.
    """
    from readmetrikks.config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    """Pinned 'now' so window boundaries do not depend on the wall clock."""
    return NOW


@pytest.fixture
def make_log_line():
    """Return a factory building combined-format access log lines."""
    def _make_log_line(
        at: datetime,
        client: str = "203.0.113.5",
        path: str = "/feed.xml",
        status: str = "200",
        referrer: str = "-",
        agent: str = BROWSER_AGENT,
    ) -> str:
        timestamp = at.strftime("%d/%b/%Y:%H:%M:%S %z")
        return f'{client} - - [{timestamp}] "GET {path} HTTP/1.1" {status} 512 "{referrer}" "{agent}"'
    return _make_log_line


@pytest.fixture
def write_log():
    """Return a helper writing lines, oldest first, to a plain or gzip log file."""
    def _write_log(path: Path, lines: list[str]) -> Path:
        content = "".join(line + "\n" for line in lines).encode("utf-8")
        if path.name.endswith(".gz"):
            path.write_bytes(gzip.compress(content))
        else:
            path.write_bytes(content)
        return path
    return _write_log
