"""SQLite implementation of the stock ledger."""

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.clock import to_db, utc_now
from stockroom.core.exceptions import InsufficientStockError, ItemNotFoundError, ValidationError
from stockroom.core.interfaces.inventory_store import IStockLedger

logger = get_logger(__name__)


class SQLiteStockLedger(IStockLedger):
    """
    Applies quantity changes to stock_items on a caller-owned transaction.

    The decrease is a single guarded UPDATE, so two concurrent issues against
    the same item can never both pass the availability check.
    """

    async def increase(self, tx: aiosqlite.Connection, item_id: int, amount: int) -> int:
        """Add ``amount`` to the item's on-hand quantity."""
        self._check_amount(amount)
        cursor = await tx.execute(
            """
            UPDATE stock_items
            SET quantity = quantity + ?, updated_at = ?
            WHERE id = ?
            """,
            (amount, to_db(utc_now()), item_id),
        )
        if cursor.rowcount == 0:
            raise ItemNotFoundError(item_id)

        quantity = await self._quantity(tx, item_id)
        logger.debug("stock_increased", item_id=item_id, amount=amount, quantity=quantity)
        return quantity

    async def decrease(self, tx: aiosqlite.Connection, item_id: int, amount: int) -> int:
        """Remove ``amount`` if at least that much is on hand."""
        self._check_amount(amount)
        cursor = await tx.execute(
            """
            UPDATE stock_items
            SET quantity = quantity - ?, updated_at = ?
            WHERE id = ? AND quantity >= ?
            """,
            (amount, to_db(utc_now()), item_id, amount),
        )
        if cursor.rowcount == 0:
            available = await self._quantity(tx, item_id)
            logger.info(
                "stock_decrease_rejected",
                item_id=item_id,
                requested=amount,
                available=available,
            )
            raise InsufficientStockError(item_id, requested=amount, available=available)

        quantity = await self._quantity(tx, item_id)
        logger.debug("stock_decreased", item_id=item_id, amount=amount, quantity=quantity)
        return quantity

    @staticmethod
    def _check_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("quantity", "must be a positive integer", amount)

    @staticmethod
    async def _quantity(tx: aiosqlite.Connection, item_id: int) -> int:
        """Current quantity; raises ItemNotFoundError when the row is missing."""
        cursor = await tx.execute("SELECT quantity FROM stock_items WHERE id = ?", (item_id,))
        row = await cursor.fetchone()
        if row is None:
            raise ItemNotFoundError(item_id)
        return int(row[0])
