"""Abstract interface for the signal sources behind the alerts feed."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.inventory import MovementDetails, StockItem, StockReorder
from stockroom.core.entities.reference import Supplier


class IAlertSignalStore(ABC):
    """Read-only scans, each independent of the others."""

    @abstractmethod
    async def low_stock_items(self, limit: int) -> list[StockItem]:
        """Items with quantity <= min_quantity, lowest quantity first."""
        pass

    @abstractmethod
    async def overstock_items(self, limit: int) -> list[StockItem]:
        """Items with quantity >= max_quantity, highest quantity first."""
        pass

    @abstractmethod
    async def movements_since(self, since: datetime, limit: int) -> list[MovementDetails]:
        """Movements dated at or after ``since``, newest first."""
        pass

    @abstractmethod
    async def suppliers_since(self, since: datetime, limit: int) -> list[Supplier]:
        """Suppliers created at or after ``since``, newest first."""
        pass

    @abstractmethod
    async def pending_reorders(self, limit: int) -> list[StockReorder]:
        """Reorder requests still pending, newest first."""
        pass
