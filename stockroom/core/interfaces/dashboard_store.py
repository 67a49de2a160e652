"""Abstract interfaces for dashboard rollups and notifications."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.dashboard import ChartPoint, DashboardStats
from stockroom.core.entities.notification import Notification


class IDashboardStore(ABC):
    """Read-only statistical rollups."""

    @abstractmethod
    async def get_stats(self, since: datetime) -> DashboardStats:
        """Item count, low-stock count, inventory value, movements since ``since``."""
        pass

    @abstractmethod
    async def get_chart(self, days: int) -> list[ChartPoint]:
        """Daily IN/OUT totals for the last ``days`` days, oldest first."""
        pass


class INotificationStore(ABC):
    """Per-user notification feed."""

    @abstractmethod
    async def list_for_user(self, user_id: int, limit: int = 50) -> list[Notification]:
        """Notifications addressed to ``user_id`` or broadcast, newest first."""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: int, user_id: int) -> Notification | None:
        """Mark one visible notification read. Returns None if not visible."""
        pass
