"""Core domain entities."""

from stockroom.core.entities.alert import Alert, AlertLevel, AlertType
from stockroom.core.entities.dashboard import ChartPoint, DashboardStats
from stockroom.core.entities.filters import ItemFilter, MovementFilter
from stockroom.core.entities.inventory import (
    MovementDetails,
    MovementType,
    ReorderStatus,
    StockItem,
    StockMovement,
    StockReorder,
    compute_total_value,
)
from stockroom.core.entities.notification import Notification
from stockroom.core.entities.reference import CurrentUser, ReferenceKind, Supplier

__all__ = [
    "Alert",
    "AlertLevel",
    "AlertType",
    "ChartPoint",
    "CurrentUser",
    "DashboardStats",
    "ItemFilter",
    "MovementDetails",
    "MovementFilter",
    "MovementType",
    "Notification",
    "ReferenceKind",
    "ReorderStatus",
    "StockItem",
    "StockMovement",
    "StockReorder",
    "Supplier",
    "compute_total_value",
]
