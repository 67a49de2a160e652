"""Core interfaces (ports) for dependency injection."""

from stockroom.core.interfaces.alert_store import IAlertSignalStore
from stockroom.core.interfaces.dashboard_store import IDashboardStore, INotificationStore
from stockroom.core.interfaces.inventory_store import IItemStore, IMovementStore, IStockLedger
from stockroom.core.interfaces.reference_resolver import IReferenceResolver

__all__ = [
    "IAlertSignalStore",
    "IDashboardStore",
    "IItemStore",
    "IMovementStore",
    "INotificationStore",
    "IReferenceResolver",
    "IStockLedger",
]
