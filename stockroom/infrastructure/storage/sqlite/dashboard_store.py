"""SQLite implementation of dashboard rollups and notifications."""

import asyncio
from datetime import date, datetime, timedelta

from stockroom.config import get_logger
from stockroom.core.clock import to_db, utc_now
from stockroom.core.entities.dashboard import ChartPoint, DashboardStats
from stockroom.core.entities.notification import Notification
from stockroom.core.interfaces.dashboard_store import IDashboardStore, INotificationStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.errors import translate_errors
from stockroom.infrastructure.storage.sqlite.rows import row_to_notification

logger = get_logger(__name__)


class SQLiteDashboardStore(IDashboardStore):
    """Statistical rollups over items and movements."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def _scalar(self, operation: str, sql: str, params: tuple = ()):
        async with translate_errors(operation, "dashboard"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
        return row[0] if row else 0

    async def get_stats(self, since: datetime) -> DashboardStats:
        """
        Run the four rollups concurrently, each on its own connection.

        Any failing query fails the whole call.
        """
        total_items, low_stock, total_value, recent = await asyncio.gather(
            self._scalar(
                "count_items",
                "SELECT COUNT(*) FROM stock_items WHERE is_active = 1",
            ),
            self._scalar(
                "count_low_stock",
                """
                SELECT COUNT(*) FROM stock_items
                WHERE is_active = 1
                  AND min_quantity IS NOT NULL
                  AND quantity <= min_quantity
                """,
            ),
            self._scalar(
                "sum_inventory_value",
                """
                SELECT COALESCE(SUM(quantity * unit_price), 0)
                FROM stock_items WHERE is_active = 1
                """,
            ),
            self._scalar(
                "count_recent_movements",
                "SELECT COUNT(*) FROM stock_movements WHERE movement_date >= ?",
                (to_db(since),),
            ),
        )
        return DashboardStats(
            total_items=int(total_items),
            low_stock_items=int(low_stock),
            total_value=round(float(total_value), 2),
            recent_movements=int(recent),
        )

    async def get_chart(self, days: int, today: date | None = None) -> list[ChartPoint]:
        """One point per day from ``today - days`` to ``today`` inclusive."""
        today = today or utc_now().date()
        start = today - timedelta(days=days)

        async with translate_errors("chart_movements", "dashboard"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    SELECT
                        substr(movement_date, 1, 10) AS day,
                        movement_type,
                        SUM(quantity) AS total
                    FROM stock_movements
                    WHERE movement_date >= ? AND movement_date < ?
                    GROUP BY day, movement_type
                    """,
                    (start.isoformat(), (today + timedelta(days=1)).isoformat()),
                )
                rows = await cursor.fetchall()

        totals: dict[tuple[str, str], int] = {
            (row["day"], row["movement_type"]): int(row["total"]) for row in rows
        }

        points = []
        for offset in range(days + 1):
            current = start + timedelta(days=offset)
            key = current.isoformat()
            points.append(
                ChartPoint(
                    date=current,
                    day=current.strftime("%a"),
                    stock_in=totals.get((key, "IN"), 0),
                    stock_out=totals.get((key, "OUT"), 0),
                )
            )
        return points


class SQLiteNotificationStore(INotificationStore):
    """Notifications addressed to one user or broadcast to all."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def list_for_user(self, user_id: int, limit: int = 50) -> list[Notification]:
        async with translate_errors("list_notifications", "notification"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM notifications
                    WHERE user_id = ? OR user_id IS NULL
                    ORDER BY created_at DESC, id DESC
                    LIMIT ?
                    """,
                    (user_id, limit),
                )
                rows = await cursor.fetchall()
        return [row_to_notification(row) for row in rows]

    async def mark_read(self, notification_id: int, user_id: int) -> Notification | None:
        """Stamp read_at once; already-read notifications keep their first stamp."""
        async with translate_errors("mark_notification_read", "notification"):
            async with self._pool.transaction() as conn:
                await conn.execute(
                    """
                    UPDATE notifications SET read_at = COALESCE(read_at, ?)
                    WHERE id = ? AND (user_id = ? OR user_id IS NULL)
                    """,
                    (to_db(utc_now()), notification_id, user_id),
                )
                cursor = await conn.execute(
                    "SELECT * FROM notifications WHERE id = ? AND (user_id = ? OR user_id IS NULL)",
                    (notification_id, user_id),
                )
                row = await cursor.fetchone()

        if row is None:
            return None
        logger.info("notification_read", notification_id=notification_id, user_id=user_id)
        return row_to_notification(row)
