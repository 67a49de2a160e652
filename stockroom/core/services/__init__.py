"""Core business services."""

from stockroom.core.services.alert_aggregator import AlertAggregator
from stockroom.core.services.dashboard import CHART_TIMEFRAMES, DashboardService
from stockroom.core.services.movement_engine import EDITABLE_FIELDS, MovementEngine
from stockroom.core.services.reference_cache import CachedReferenceResolver

__all__ = [
    "AlertAggregator",
    "CHART_TIMEFRAMES",
    "CachedReferenceResolver",
    "DashboardService",
    "EDITABLE_FIELDS",
    "MovementEngine",
]
