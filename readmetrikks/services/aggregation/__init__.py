from .service import AggregationService, REGULAR_DAY_SECONDS

__all__ = ["AggregationService", "REGULAR_DAY_SECONDS"]
