"""
Alert Aggregator.

Scans several independent signal sources on demand and merges them into one
feed ordered newest first. A failing source degrades to a single
internal_warning alert; the feed itself never fails.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from stockroom.config import get_logger
from stockroom.config.settings import AlertSettings
from stockroom.core.clock import utc_now
from stockroom.core.entities.alert import Alert, AlertLevel, AlertType
from stockroom.core.entities.inventory import MovementType
from stockroom.core.interfaces.alert_store import IAlertSignalStore

logger = get_logger(__name__)

# Alerts without a timestamp sort as the oldest entries
EPOCH = datetime(1970, 1, 1)


class AlertAggregator:
    """
    Builds the alerts feed from an IAlertSignalStore.

    Sources are scanned concurrently with no shared snapshot, so two sources
    may observe different states under concurrent writes.
    """

    def __init__(
        self,
        signal_store: IAlertSignalStore,
        settings: AlertSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = signal_store
        self._settings = settings or AlertSettings()
        self._clock = clock

    async def list_alerts(self) -> list[Alert]:
        """
        Run every source and return the merged feed.

        Returns:
            Alerts sorted by created_at descending; ties keep source order.
        """
        now = self._clock()
        sources: list[tuple[str, Callable[[], Awaitable[list[Alert]]]]] = [
            (AlertType.LOW_STOCK.value, lambda: self._low_stock(now)),
            (AlertType.OVERSTOCK.value, lambda: self._overstock(now)),
            (AlertType.MOVEMENT.value, lambda: self._recent_movements(now)),
            (AlertType.SUPPLIER_NEW.value, lambda: self._new_suppliers(now)),
            (AlertType.REORDER_PENDING.value, lambda: self._pending_reorders()),
        ]

        results = await asyncio.gather(
            *(scan() for _, scan in sources), return_exceptions=True
        )

        alerts: list[Alert] = []
        warnings: list[Alert] = []
        for (name, _), result in zip(sources, results):
            if isinstance(result, Exception):
                logger.warning(
                    "alert_source_failed",
                    source=name,
                    error=str(result),
                    error_type=result.__class__.__name__,
                )
                warnings.append(self._source_warning(name, result, now))
            elif isinstance(result, BaseException):
                raise result
            else:
                alerts.extend(result)

        alerts.extend(warnings)
        alerts.sort(key=lambda a: a.created_at or EPOCH, reverse=True)

        logger.info(
            "alert_feed_built",
            total=len(alerts),
            failed_sources=len(warnings),
        )
        return alerts

    async def _low_stock(self, now: datetime) -> list[Alert]:
        items = await self._store.low_stock_items(self._settings.low_stock_limit)
        return [
            Alert(
                id=f"lowstock-{item.id}",
                type=AlertType.LOW_STOCK,
                title=f"Low stock: {item.name}",
                message=(
                    f"Only {item.quantity} left (min {item.min_quantity}). "
                    "Consider reordering."
                ),
                level=AlertLevel.WARNING,
                created_at=now,
                meta={
                    "item_id": item.id,
                    "quantity": item.quantity,
                    "min_quantity": item.min_quantity,
                    "max_quantity": item.max_quantity,
                },
            )
            for item in items
        ]

    async def _overstock(self, now: datetime) -> list[Alert]:
        items = await self._store.overstock_items(self._settings.overstock_limit)
        return [
            Alert(
                id=f"overstock-{item.id}",
                type=AlertType.OVERSTOCK,
                title=f"Overstock: {item.name}",
                message=f"{item.quantity} in stock (max {item.max_quantity}).",
                level=AlertLevel.INFO,
                created_at=now,
                meta={
                    "item_id": item.id,
                    "quantity": item.quantity,
                    "max_quantity": item.max_quantity,
                },
            )
            for item in items
        ]

    async def _recent_movements(self, now: datetime) -> list[Alert]:
        since = now - timedelta(hours=self._settings.movement_window_hours)
        movements = await self._store.movements_since(since, self._settings.movement_limit)

        alerts: list[Alert] = []
        for mv in movements:
            verb = "received" if mv.movement_type == MovementType.IN else "removed"
            value = f", ${mv.total_value:.2f}" if mv.total_value else ""
            alerts.append(
                Alert(
                    id=f"mv-{mv.id}",
                    type=AlertType.MOVEMENT,
                    title=f"{mv.movement_type.value} • {mv.item_name}",
                    message=f"{mv.quantity} {verb}{value} by {mv.user_name or 'unknown'}",
                    level=AlertLevel.INFO,
                    created_at=mv.movement_date,
                    meta={"movement_id": mv.id, "item_id": mv.item_id},
                )
            )
        return alerts

    async def _new_suppliers(self, now: datetime) -> list[Alert]:
        since = now - timedelta(days=self._settings.supplier_window_days)
        suppliers = await self._store.suppliers_since(since, self._settings.supplier_limit)
        return [
            Alert(
                id=f"supplier-new-{s.id}",
                type=AlertType.SUPPLIER_NEW,
                title=f"New supplier: {s.name}",
                message=f"Supplier {s.name} was added" + (f" (code {s.code})." if s.code else "."),
                level=AlertLevel.SUCCESS,
                created_at=s.created_at,
                meta={"supplier_id": s.id},
            )
            for s in suppliers
        ]

    async def _pending_reorders(self) -> list[Alert]:
        reorders = await self._store.pending_reorders(self._settings.reorder_limit)
        return [
            Alert(
                id=f"reorder-{r.id}",
                type=AlertType.REORDER_PENDING,
                title="Reorder requested",
                message=f"Item {r.item_name or r.item_id}: {r.requested_qty} (status: {r.status.value})",
                level=AlertLevel.INFO,
                created_at=r.created_at,
                meta={"reorder_id": r.id, "item_id": r.item_id},
            )
            for r in reorders
        ]

    @staticmethod
    def _source_warning(source: str, error: Exception, now: datetime) -> Alert:
        return Alert(
            id=f"warn-{source}",
            type=AlertType.INTERNAL_WARNING,
            title="Alert generation warning",
            message=str(error) or error.__class__.__name__,
            level=AlertLevel.WARNING,
            created_at=now,
            meta={"source": source},
        )
