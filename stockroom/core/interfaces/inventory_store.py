"""Abstract interfaces for stock items, movements and the stock ledger."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any

from stockroom.core.entities.filters import ItemFilter, MovementFilter
from stockroom.core.entities.inventory import MovementDetails, StockItem, StockMovement


class IStockLedger(ABC):
    """
    Sole writer of an item's on-hand quantity.

    Both mutators run on the caller's transaction handle so the quantity
    change commits or rolls back together with the movement row.
    """

    @abstractmethod
    async def increase(self, tx: Any, item_id: int, amount: int) -> int:
        """Add ``amount`` to the item's quantity. Returns the new quantity."""
        pass

    @abstractmethod
    async def decrease(self, tx: Any, item_id: int, amount: int) -> int:
        """
        Remove ``amount`` from the item's quantity.

        Raises InsufficientStockError when less than ``amount`` is on hand.
        """
        pass


class IMovementStore(ABC):
    """Interface for stock movement persistence."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Open a write transaction; commits on exit, rolls back on error."""
        pass

    @abstractmethod
    async def insert(self, tx: Any, movement: StockMovement) -> StockMovement:
        """Insert a movement row inside ``tx``."""
        pass

    @abstractmethod
    async def user_exists(self, tx: Any, user_id: int) -> bool:
        """Whether a user with this id exists, read inside ``tx``."""
        pass

    @abstractmethod
    async def get_for_update(self, tx: Any, movement_id: int) -> StockMovement | None:
        """Read a movement row inside ``tx``."""
        pass

    @abstractmethod
    async def update(self, tx: Any, movement: StockMovement) -> StockMovement:
        """Overwrite a movement row inside ``tx``."""
        pass

    @abstractmethod
    async def delete(self, tx: Any, movement_id: int) -> None:
        """Delete a movement row inside ``tx``."""
        pass

    @abstractmethod
    async def get_details(self, movement_id: int) -> MovementDetails | None:
        """Get a movement with joined display names."""
        pass

    @abstractmethod
    async def list_details(self, filters: MovementFilter) -> list[MovementDetails]:
        """List movements, newest first."""
        pass

    @abstractmethod
    async def recent(self, limit: int = 10) -> list[MovementDetails]:
        """Most recent movements."""
        pass


class IItemStore(ABC):
    """Interface for stock item persistence."""

    @abstractmethod
    async def create_item(self, item: StockItem) -> StockItem:
        """Create a new stock item in its own transaction."""
        pass

    @abstractmethod
    async def insert_item(self, tx: Any, item: StockItem) -> StockItem:
        """Insert a stock item inside a transaction opened by the caller."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> StockItem | None:
        """Get stock item by ID."""
        pass

    @abstractmethod
    async def get_by_barcode(self, barcode: str) -> StockItem | None:
        """Get an active stock item by barcode."""
        pass

    @abstractmethod
    async def list_items(self, filters: ItemFilter) -> list[StockItem]:
        """List stock items ordered by name."""
        pass

    @abstractmethod
    async def update_item(self, item: StockItem) -> StockItem:
        """Update descriptive fields and thresholds. Quantity is not written."""
        pass

    @abstractmethod
    async def deactivate_item(self, item_id: int) -> bool:
        """Soft delete. Returns False when the item does not exist."""
        pass

    @abstractmethod
    async def list_low_stock(self) -> list[StockItem]:
        """Active items at or under their minimum quantity."""
        pass
