from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, TypeAdapter, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from readmetrikks.domain.readership.models import ReportConfig


class ReadershipSettings(BaseSettings):
    """Readership analysis configuration settings.

    Reports can be given inline as JSON (READERSHIP_REPORTS) and/or in a
    JSON file holding a list of report objects (READERSHIP_REPORTS_FILE).
    """

    model_config = SettingsConfigDict(env_prefix="READERSHIP_", env_file=".env", extra="ignore")

    regular_interval_days: int = Field(
        default=1,
        ge=1,
        description="Minimum span, in regular days, between a reader's first and last visit",
    )
    days_to_consider: int = Field(
        default=14,
        ge=1,
        description="Number of days before now to scan",
    )
    reports: list[ReportConfig] = Field(
        default_factory=list,
        description="Report definitions: label, test_type, test",
    )
    reports_file: Path | None = Field(
        default=None,
        description="JSON file with additional report definitions",
    )

    @model_validator(mode="after")
    def load_reports_file(self) -> "ReadershipSettings":
        """Append the reports defined in reports_file."""
        if self.reports_file is None:
            return self
        if not self.reports_file.exists():
            raise ValueError(f"Reports file not found: {self.reports_file}")
        try:
            loaded = TypeAdapter(list[ReportConfig]).validate_json(
                self.reports_file.read_text(encoding="utf-8")
            )
        except ValidationError as e:
            raise ValueError(f"Invalid reports file {self.reports_file}: {e}") from e
        self.reports = [*self.reports, *loaded]
        return self


class LogSourceSettings(BaseSettings):
    """Log source discovery settings."""

    model_config = SettingsConfigDict(env_prefix="LOGS_", env_file=".env", extra="ignore")

    log_dir: Path = Field(
        default=Path("/var/log/nginx"),
        description="Directory holding the access log and its rotations",
    )
    pattern: str = Field(
        default="access.log*",
        description="Glob selecting the log files inside log_dir",
    )
    order_by: Literal["name", "mtime"] = Field(
        default="name",
        description="Order files newest-first by rotation name or by modification time",
    )
    chunk_size: int = Field(
        default=64 * 1024,
        ge=1,
        description="Bytes read per step when reading a log backwards",
    )


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    workers: int = Field(default=1, description="Number of worker processes")
    reload: bool = Field(default=False, description="Enable auto-reload on code changes")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


class SchedulerSettings(BaseSettings):
    """APScheduler configuration for periodic readership refreshes."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_", env_file=".env", extra="ignore")

    enabled: bool = Field(
        default=True,
        description="Enable scheduled readership refreshes",
    )
    refresh_interval_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes between readership refreshes",
    )


class Settings(BaseSettings):
    """Main application settings.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values

    Example .env file:
        APP_DEBUG=true
        LOGS_LOG_DIR=/var/log/nginx
        READERSHIP_DAYS_TO_CONSIDER=14
        READERSHIP_REPORTS=[{"label": "Feed", "test_type": "path", "test": "/feed.xml"}]
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    name: str = Field(default="ReadMetrikks API", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    description: str = Field(
        default="Current readership estimates from web server access logs",
        description="Application description",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )

    # Sub-configurations
    api: APISettings = Field(default_factory=APISettings)
    readership: ReadershipSettings = Field(default_factory=ReadershipSettings)
    logs: LogSourceSettings = Field(default_factory=LogSourceSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function is cached to ensure we only parse configuration once.
    Use this function throughout the application to access settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
