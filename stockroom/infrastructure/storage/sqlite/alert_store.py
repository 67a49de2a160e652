"""SQLite scans feeding the alerts feed."""

from datetime import datetime

from stockroom.core.clock import to_db
from stockroom.core.entities.inventory import MovementDetails, StockItem, StockReorder
from stockroom.core.entities.reference import Supplier
from stockroom.core.interfaces.alert_store import IAlertSignalStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.errors import translate_errors
from stockroom.infrastructure.storage.sqlite.item_store import ITEM_SELECT
from stockroom.infrastructure.storage.sqlite.movement_store import DETAILS_SELECT
from stockroom.infrastructure.storage.sqlite.rows import (
    row_to_item,
    row_to_movement_details,
    row_to_reorder,
    row_to_supplier,
)


class SQLiteAlertSignalStore(IAlertSignalStore):
    """
    Read-only queries behind each alert source.

    Every method acquires its own connection, so a failure in one scan has no
    effect on the others.
    """

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def low_stock_items(self, limit: int) -> list[StockItem]:
        async with translate_errors("scan_low_stock", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {ITEM_SELECT}
                    WHERE si.min_quantity IS NOT NULL
                      AND si.quantity <= si.min_quantity
                    ORDER BY si.quantity ASC, si.id ASC
                    LIMIT ?
                    """,
                    (limit,),
                )
                rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def overstock_items(self, limit: int) -> list[StockItem]:
        async with translate_errors("scan_overstock", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {ITEM_SELECT}
                    WHERE si.max_quantity IS NOT NULL
                      AND si.quantity >= si.max_quantity
                    ORDER BY si.quantity DESC, si.id ASC
                    LIMIT ?
                    """,
                    (limit,),
                )
                rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def movements_since(self, since: datetime, limit: int) -> list[MovementDetails]:
        async with translate_errors("scan_movements", "movement"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {DETAILS_SELECT}
                    WHERE sm.movement_date >= ?
                    ORDER BY sm.movement_date DESC, sm.id DESC
                    LIMIT ?
                    """,
                    (to_db(since), limit),
                )
                rows = await cursor.fetchall()
        return [row_to_movement_details(row) for row in rows]

    async def suppliers_since(self, since: datetime, limit: int) -> list[Supplier]:
        async with translate_errors("scan_suppliers", "supplier"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    SELECT id, name, code, created_at
                    FROM suppliers
                    WHERE created_at >= ?
                    ORDER BY created_at DESC, id DESC
                    LIMIT ?
                    """,
                    (to_db(since), limit),
                )
                rows = await cursor.fetchall()
        return [row_to_supplier(row) for row in rows]

    async def pending_reorders(self, limit: int) -> list[StockReorder]:
        async with translate_errors("scan_reorders", "reorder"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    SELECT r.*, si.name AS item_name
                    FROM stock_reorders r
                    LEFT JOIN stock_items si ON r.item_id = si.id
                    WHERE r.status = 'pending'
                    ORDER BY r.created_at DESC, r.id DESC
                    LIMIT ?
                    """,
                    (limit,),
                )
                rows = await cursor.fetchall()
        return [row_to_reorder(row) for row in rows]
