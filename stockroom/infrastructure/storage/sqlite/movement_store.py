"""SQLite implementation of stock movement storage."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.clock import to_db, utc_now
from stockroom.core.entities.filters import MovementFilter
from stockroom.core.entities.inventory import MovementDetails, StockMovement
from stockroom.core.exceptions import MovementNotFoundError
from stockroom.core.interfaces.inventory_store import IMovementStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.errors import translate_errors
from stockroom.infrastructure.storage.sqlite.filters import Eq, Gte, Lte, Search, build_where
from stockroom.infrastructure.storage.sqlite.rows import row_to_movement, row_to_movement_details

logger = get_logger(__name__)

DETAILS_SELECT = """
    SELECT
        sm.*,
        si.name AS item_name,
        l.name AS location,
        s.name AS supplier,
        c.name AS customer,
        COALESCE(u.full_name, u.name) AS user_name
    FROM stock_movements sm
    LEFT JOIN stock_items si ON sm.item_id = si.id
    LEFT JOIN locations l ON sm.location_id = l.id
    LEFT JOIN suppliers s ON sm.supplier_id = s.id
    LEFT JOIN customers c ON sm.customer_id = c.id
    LEFT JOIN users u ON sm.created_by = u.id
"""


class SQLiteMovementStore(IMovementStore):
    """SQLite implementation of stock movement storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Write transaction holding the database write lock from the start."""
        async with translate_errors("movement_transaction", "movement"):
            async with self._pool.transaction(immediate=True) as conn:
                yield conn

    async def insert(self, tx: aiosqlite.Connection, movement: StockMovement) -> StockMovement:
        """Insert a movement row."""
        movement.created_at = utc_now()
        cursor = await tx.execute(
            """
            INSERT INTO stock_movements (
                item_id, movement_type, quantity, unit_price, total_value,
                notes, reference_number, location_id, supplier_id, customer_id,
                movement_date, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.item_id,
                movement.movement_type.value,
                movement.quantity,
                movement.unit_price,
                movement.total_value,
                movement.notes,
                movement.reference_number,
                movement.location_id,
                movement.supplier_id,
                movement.customer_id,
                to_db(movement.movement_date),
                movement.created_by,
                to_db(movement.created_at),
            ),
        )
        movement.id = cursor.lastrowid
        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            type=movement.movement_type.value,
            qty=movement.quantity,
        )
        return movement

    async def user_exists(self, tx: aiosqlite.Connection, user_id: int) -> bool:
        cursor = await tx.execute("SELECT 1 FROM users WHERE id = ?", (user_id,))
        return await cursor.fetchone() is not None

    async def get_for_update(
        self, tx: aiosqlite.Connection, movement_id: int
    ) -> StockMovement | None:
        cursor = await tx.execute("SELECT * FROM stock_movements WHERE id = ?", (movement_id,))
        row = await cursor.fetchone()
        return row_to_movement(row) if row else None

    async def update(self, tx: aiosqlite.Connection, movement: StockMovement) -> StockMovement:
        """Overwrite every editable column of a movement row."""
        movement.updated_at = utc_now()
        cursor = await tx.execute(
            """
            UPDATE stock_movements SET
                item_id = ?,
                movement_type = ?,
                quantity = ?,
                unit_price = ?,
                total_value = ?,
                notes = ?,
                reference_number = ?,
                location_id = ?,
                supplier_id = ?,
                customer_id = ?,
                movement_date = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                movement.item_id,
                movement.movement_type.value,
                movement.quantity,
                movement.unit_price,
                movement.total_value,
                movement.notes,
                movement.reference_number,
                movement.location_id,
                movement.supplier_id,
                movement.customer_id,
                to_db(movement.movement_date),
                to_db(movement.updated_at),
                movement.id,
            ),
        )
        if cursor.rowcount == 0:
            raise MovementNotFoundError(movement.id)
        logger.info("stock_movement_updated", movement_id=movement.id)
        return movement

    async def delete(self, tx: aiosqlite.Connection, movement_id: int) -> None:
        cursor = await tx.execute("DELETE FROM stock_movements WHERE id = ?", (movement_id,))
        if cursor.rowcount == 0:
            raise MovementNotFoundError(movement_id)
        logger.info("stock_movement_deleted", movement_id=movement_id)

    async def get_details(self, movement_id: int) -> MovementDetails | None:
        """Get a movement with item, location, party and creator names."""
        async with translate_errors("get_movement", "movement"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"{DETAILS_SELECT} WHERE sm.id = ?",
                    (movement_id,),
                )
                row = await cursor.fetchone()
        return row_to_movement_details(row) if row else None

    async def list_details(self, filters: MovementFilter) -> list[MovementDetails]:
        """List movements matching ``filters``, newest first."""
        where, params = build_where([
            Search(("si.name", "sm.reference_number", "sm.notes"), filters.search),
            Eq("sm.movement_type", filters.movement_type.value if filters.movement_type else None),
            Eq("sm.item_id", filters.item_id),
            Gte("sm.movement_date", to_db(filters.date_from)),
            Lte("sm.movement_date", to_db(filters.date_to)),
        ])
        async with translate_errors("list_movements", "movement"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {DETAILS_SELECT}
                    {where}
                    ORDER BY sm.movement_date DESC, sm.id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (*params, filters.limit, filters.offset),
                )
                rows = await cursor.fetchall()
        return [row_to_movement_details(row) for row in rows]

    async def recent(self, limit: int = 10) -> list[MovementDetails]:
        """Most recently created movements."""
        async with translate_errors("recent_movements", "movement"):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    {DETAILS_SELECT}
                    ORDER BY sm.created_at DESC, sm.id DESC
                    LIMIT ?
                    """,
                    (limit,),
                )
                rows = await cursor.fetchall()
        return [row_to_movement_details(row) for row in rows]
