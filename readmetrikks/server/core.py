"""Application factory for creating Litestar app instance."""

from __future__ import annotations


from litestar import Litestar
from litestar.openapi import OpenAPIConfig
from litestar.middleware.logging import LoggingMiddlewareConfig

from readmetrikks.config.settings import get_settings
from readmetrikks.server import plugins
from readmetrikks.server.lifecycle import on_startup, on_shutdown
from readmetrikks.server.routes import get_route_handlers


def create_app() -> Litestar:
    """Create and configure the Litestar application.

    This factory function loads configuration and initializes the app
    with proper settings for OpenAPI, compression, logging and lifecycle hooks.

    Returns:
        Litestar: Configured application instance
    """
    # Load settings once at app creation
    settings = get_settings()

    # Configure OpenAPI
    openapi_config = OpenAPIConfig(
        title=settings.name,
        version=settings.version,
        description=settings.description,
        create_examples=True,
    )

    logging_middleware_config = LoggingMiddlewareConfig()

    # Create app with configuration
    app = Litestar(
        debug=settings.debug,
        route_handlers=get_route_handlers(),
        on_startup=[on_startup],
        on_shutdown=[on_shutdown],
        logging_config=plugins.logging_config,
        openapi_config=openapi_config,
        compression_config=plugins.compression_config,
        middleware=[logging_middleware_config.middleware],
    )

    return app
