"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from stockroom.core.clock import utc_now


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"

    @property
    def sign(self) -> int:
        """+1 for receipts, -1 for issues."""
        return 1 if self is MovementType.IN else -1


class StockItem(BaseModel):
    """A stocked article with its on-hand quantity and thresholds."""

    id: int | None = None
    name: str
    description: str | None = None
    sku: str | None = None
    barcode: str | None = None
    unit_price: float = 0.0
    quantity: int = Field(default=0, ge=0)
    min_quantity: int | None = None
    max_quantity: int | None = None
    is_active: bool = True
    category_id: int | None = None
    location_id: int | None = None
    created_by: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Display fields filled by joined reads
    category: str | None = None
    location: str | None = None

    @property
    def total_value(self) -> float:
        """Inventory value = quantity * unit_price."""
        return self.quantity * self.unit_price

    @property
    def is_low_stock(self) -> bool:
        return self.min_quantity is not None and self.quantity <= self.min_quantity

    @property
    def is_overstock(self) -> bool:
        return self.max_quantity is not None and self.quantity >= self.max_quantity


def compute_total_value(quantity: int, unit_price: float | None) -> float | None:
    """quantity * unit_price, or None when no price was captured."""
    if unit_price is None:
        return None
    return round(quantity * unit_price, 2)


class StockMovement(BaseModel):
    """Records a single stock movement (receipt or issue)."""

    id: int | None = None
    item_id: int
    movement_type: MovementType
    quantity: int = Field(gt=0)
    unit_price: float | None = None
    total_value: float | None = None
    notes: str | None = None
    reference_number: str | None = None
    location_id: int | None = None
    supplier_id: int | None = None
    customer_id: int | None = None
    movement_date: datetime = Field(default_factory=utc_now)
    created_by: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None

    @property
    def signed_quantity(self) -> int:
        """Effect of this movement on the item's on-hand quantity."""
        return self.movement_type.sign * self.quantity


class MovementDetails(StockMovement):
    """A movement enriched with display names from joined tables."""

    item_name: str | None = None
    location: str | None = None
    supplier: str | None = None
    customer: str | None = None
    user_name: str | None = None


class ReorderStatus(str, Enum):
    """Lifecycle of a reorder request."""

    PENDING = "pending"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class StockReorder(BaseModel):
    """A request to replenish an item."""

    id: int | None = None
    item_id: int
    item_name: str | None = None
    requested_qty: int = Field(gt=0)
    status: ReorderStatus = ReorderStatus.PENDING
    created_at: datetime | None = None
