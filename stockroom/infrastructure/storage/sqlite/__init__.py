"""SQLite storage implementations."""

from stockroom.infrastructure.storage.sqlite.alert_store import SQLiteAlertSignalStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.dashboard_store import (
    SQLiteDashboardStore,
    SQLiteNotificationStore,
)
from stockroom.infrastructure.storage.sqlite.errors import translate_errors
from stockroom.infrastructure.storage.sqlite.item_store import SQLiteItemStore, generate_sku
from stockroom.infrastructure.storage.sqlite.ledger import SQLiteStockLedger
from stockroom.infrastructure.storage.sqlite.movement_store import SQLiteMovementStore
from stockroom.infrastructure.storage.sqlite.reference_resolver import SQLiteReferenceResolver

__all__ = [
    "ConnectionPool",
    "SQLiteAlertSignalStore",
    "SQLiteDashboardStore",
    "SQLiteItemStore",
    "SQLiteMovementStore",
    "SQLiteNotificationStore",
    "SQLiteReferenceResolver",
    "SQLiteStockLedger",
    "generate_sku",
    "translate_errors",
]
