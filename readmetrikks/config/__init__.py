"""Configuration module for ReadMetrikks."""

from readmetrikks.config.settings import (
    APISettings,
    LogSourceSettings,
    ReadershipSettings,
    SchedulerSettings,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "APISettings",
    "LogSourceSettings",
    "ReadershipSettings",
    "SchedulerSettings",
]
