"""Central route registration."""
from litestar.types import ControllerRouterHandler

from readmetrikks.api.v1.readership_controller import ReadershipController
from readmetrikks.api.v1.settings import read_settings
from readmetrikks.api.v1.stats import stats

def get_route_handlers() -> list[ControllerRouterHandler]:
    """Get all route handlers for the application."""
    return [
        ReadershipController,
        read_settings,
        stats,
    ]
