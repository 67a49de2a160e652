"""SQLite implementation of stock item storage."""

import re

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.clock import to_db, utc_now
from stockroom.core.entities.filters import ItemFilter
from stockroom.core.entities.inventory import StockItem
from stockroom.core.exceptions import ItemNotFoundError
from stockroom.core.interfaces.inventory_store import IItemStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.errors import translate_errors
from stockroom.infrastructure.storage.sqlite.filters import Eq, Raw, Search, build_where
from stockroom.infrastructure.storage.sqlite.rows import row_to_item

logger = get_logger(__name__)

ITEM_SELECT = """
    SELECT
        si.*,
        c.name AS category,
        l.name AS location
    FROM stock_items si
    LEFT JOIN categories c ON si.category_id = c.id
    LEFT JOIN locations l ON si.location_id = l.id
"""


def generate_sku(category: str | None, name: str, sequence: int) -> str:
    """
    Build a SKU like ``ELE-CAB-0042`` from category, name and a sequence.

    Non-alphanumeric characters are dropped; a missing category becomes GEN.
    """

    def prefix(value: str | None, fallback: str) -> str:
        cleaned = re.sub(r"[^A-Za-z0-9]", "", value or "").upper()
        return (cleaned[:3] or fallback).ljust(3, "X")

    return f"{prefix(category, 'GEN')}-{prefix(name, 'ITM')}-{sequence:04d}"


class SQLiteItemStore(IItemStore):
    """SQLite implementation of stock item storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_item(self, item: StockItem) -> StockItem:
        """Create a new stock item, generating a SKU when none is given."""
        async with translate_errors("create_item", "item"):
            async with self._pool.transaction(immediate=True) as conn:
                return await self.insert_item(conn, item)

    async def insert_item(self, tx: aiosqlite.Connection, item: StockItem) -> StockItem:
        """Insert on the caller's write transaction; the SKU sequence reads inside it."""
        now = utc_now()
        item.created_at = now
        item.updated_at = now
        async with translate_errors("create_item", "item"):
            if not item.sku:
                cursor = await tx.execute("SELECT COALESCE(MAX(id), 0) + 1 FROM stock_items")
                sequence = (await cursor.fetchone())[0]
                item.sku = generate_sku(item.category, item.name, sequence)

            cursor = await tx.execute(
                """
                INSERT INTO stock_items (
                    name, description, sku, barcode, category_id, location_id,
                    unit_price, quantity, min_quantity, max_quantity, is_active,
                    created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.name,
                    item.description,
                    item.sku,
                    item.barcode,
                    item.category_id,
                    item.location_id,
                    item.unit_price,
                    item.quantity,
                    item.min_quantity,
                    item.max_quantity,
                    int(item.is_active),
                    item.created_by,
                    to_db(item.created_at),
                    to_db(item.updated_at),
                ),
            )
            item.id = cursor.lastrowid

        logger.info("stock_item_created", item_id=item.id, sku=item.sku)
        return item

    async def get_item(self, item_id: int) -> StockItem | None:
        """Get stock item by ID, active or not."""
        async with translate_errors("get_item", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(f"{ITEM_SELECT} WHERE si.id = ?", (item_id,))
                row = await cursor.fetchone()
        return row_to_item(row) if row else None

    async def get_by_barcode(self, barcode: str) -> StockItem | None:
        async with translate_errors("get_item_by_barcode", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"{ITEM_SELECT} WHERE si.barcode = ? AND si.is_active = 1",
                    (barcode,),
                )
                row = await cursor.fetchone()
        return row_to_item(row) if row else None

    async def list_items(self, filters: ItemFilter) -> list[StockItem]:
        """List stock items ordered by name."""
        predicates = [
            Search(("si.name", "si.sku", "si.barcode"), filters.search),
            Eq("si.category_id", filters.category_id),
            Eq("si.location_id", filters.location_id),
        ]
        if not filters.include_inactive:
            predicates.append(Raw("si.is_active = 1"))
        where, params = build_where(predicates)
        async with translate_errors("list_items", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {ITEM_SELECT}
                    {where}
                    ORDER BY si.name ASC, si.id ASC
                    LIMIT ? OFFSET ?
                    """,
                    (*params, filters.limit, filters.offset),
                )
                rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def update_item(self, item: StockItem) -> StockItem:
        """Update descriptive fields and thresholds. Quantity belongs to the ledger."""
        item.updated_at = utc_now()
        async with translate_errors("update_item", "item"):
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE stock_items SET
                        name = ?,
                        description = ?,
                        sku = ?,
                        barcode = ?,
                        category_id = ?,
                        location_id = ?,
                        unit_price = ?,
                        min_quantity = ?,
                        max_quantity = ?,
                        is_active = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        item.name,
                        item.description,
                        item.sku,
                        item.barcode,
                        item.category_id,
                        item.location_id,
                        item.unit_price,
                        item.min_quantity,
                        item.max_quantity,
                        int(item.is_active),
                        to_db(item.updated_at),
                        item.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise ItemNotFoundError(item.id)

        logger.info("stock_item_updated", item_id=item.id)
        return item

    async def deactivate_item(self, item_id: int) -> bool:
        async with translate_errors("deactivate_item", "item"):
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    "UPDATE stock_items SET is_active = 0, updated_at = ? WHERE id = ?",
                    (to_db(utc_now()), item_id),
                )
                found = cursor.rowcount > 0

        if found:
            logger.info("stock_item_deactivated", item_id=item_id)
        return found

    async def list_low_stock(self) -> list[StockItem]:
        """Active items at or under their minimum, lowest quantity first."""
        async with translate_errors("list_low_stock", "item"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {ITEM_SELECT}
                    WHERE si.is_active = 1
                      AND si.min_quantity IS NOT NULL
                      AND si.quantity <= si.min_quantity
                    ORDER BY si.quantity ASC, si.name ASC
                    """
                )
                rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]
