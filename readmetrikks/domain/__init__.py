from .readership.models import HitStats
from .readership.models import Report
from .readership.models import ReportConfig

__all__ = [
    "HitStats",
    "Report",
    "ReportConfig",
]
