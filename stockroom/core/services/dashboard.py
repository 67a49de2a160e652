"""Dashboard Aggregator."""

from collections.abc import Callable
from datetime import datetime, timedelta

from stockroom.config import get_logger
from stockroom.core.clock import utc_now
from stockroom.core.entities.dashboard import ChartPoint, DashboardStats
from stockroom.core.interfaces.dashboard_store import IDashboardStore

logger = get_logger(__name__)

CHART_TIMEFRAMES = {"week": 7, "month": 30, "quarter": 90}
DEFAULT_TIMEFRAME = "week"
RECENT_MOVEMENT_DAYS = 7


class DashboardService:
    """Read-only rollups for the dashboard."""

    def __init__(
        self,
        store: IDashboardStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._clock = clock

    async def get_stats(self) -> DashboardStats:
        since = self._clock() - timedelta(days=RECENT_MOVEMENT_DAYS)
        stats = await self._store.get_stats(since)
        logger.debug("dashboard_stats_computed", **stats.model_dump())
        return stats

    async def get_chart(self, timeframe: str | None = None) -> list[ChartPoint]:
        """Daily IN/OUT totals; unknown timeframes fall back to a week."""
        days = CHART_TIMEFRAMES.get(timeframe or DEFAULT_TIMEFRAME)
        if days is None:
            logger.debug("unknown_chart_timeframe", timeframe=timeframe)
            days = CHART_TIMEFRAMES[DEFAULT_TIMEFRAME]
        return await self._store.get_chart(days)
