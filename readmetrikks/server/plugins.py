"""Global plugin configurations.

This module provides:
- Logging configuration
- Response compression configuration
"""
from __future__ import annotations

from litestar.config.compression import CompressionConfig
from litestar.logging import LoggingConfig

from readmetrikks.config.settings import get_settings

settings = get_settings()

# Logging configuration
logging_config = LoggingConfig(
    root={"level": settings.api.log_level, "handlers": ["queue_listener"]},
    formatters={
        "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
    },
    log_exceptions="always",
)

compression_config = CompressionConfig(
    backend="gzip",
    minimum_size=1000,  # Only compress responses >= 1KB
    gzip_compress_level=6,
)
