"""Storage infrastructure implementations."""

from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAlertSignalStore,
    SQLiteDashboardStore,
    SQLiteItemStore,
    SQLiteMovementStore,
    SQLiteNotificationStore,
    SQLiteReferenceResolver,
    SQLiteStockLedger,
)

__all__ = [
    "ConnectionPool",
    "SQLiteAlertSignalStore",
    "SQLiteDashboardStore",
    "SQLiteItemStore",
    "SQLiteMovementStore",
    "SQLiteNotificationStore",
    "SQLiteReferenceResolver",
    "SQLiteStockLedger",
]
