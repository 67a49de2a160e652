"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class PostMovementRequest(BaseModel):
    """Request to post a stock movement.

    Types are kept loose so the engine performs the checks: a missing
    item, a bad type or a non-positive quantity is reported as a 400
    validation error rather than a schema error.
    """

    item_id: int | None = Field(default=None, description="Stock item ID", examples=[12])
    movement_type: str | None = Field(
        default=None,
        description="IN (receipt) or OUT (issue)",
        examples=["IN", "OUT"],
    )
    quantity: float | None = Field(default=None, description="Positive whole quantity", examples=[5])
    unit_price: float | None = Field(default=None, description="Price per unit", examples=[2.5])
    notes: str | None = Field(default=None, description="Free-text notes")
    reference_number: str | None = Field(
        default=None,
        description="External reference (PO, delivery note...)",
        examples=["PO-2041"],
    )
    location: str | None = Field(default=None, description="Location name", examples=["Main Warehouse"])
    supplier: str | None = Field(default=None, description="Supplier name")
    customer: str | None = Field(default=None, description="Customer name")
    movement_date: datetime | None = Field(default=None, description="Defaults to now")
    created_by: int | None = Field(
        default=None,
        description="Creator user ID; defaults to the current user",
    )


class UpdateMovementRequest(BaseModel):
    """Partial edit of a movement. Only fields present in the body are changed."""

    item_id: int | None = None
    movement_type: str | None = None
    quantity: float | None = None
    unit_price: float | None = None
    notes: str | None = None
    reference_number: str | None = None
    location: str | None = None
    supplier: str | None = None
    customer: str | None = None
    movement_date: datetime | None = None


class CreateItemRequest(BaseModel):
    """Request to create a stock item."""

    name: str = Field(..., min_length=1, max_length=200, description="Item name")
    description: str | None = Field(default=None, description="Item description")
    sku: str | None = Field(default=None, description="SKU; generated when omitted")
    barcode: str | None = Field(default=None, description="Barcode")
    category: str | None = Field(default=None, description="Category name")
    location: str | None = Field(default=None, description="Location name")
    unit_price: float = Field(default=0.0, ge=0, description="Price per unit")
    quantity: int = Field(default=0, ge=0, description="Opening quantity")
    min_quantity: int | None = Field(default=None, ge=0, description="Low-stock threshold")
    max_quantity: int | None = Field(default=None, ge=0, description="Overstock threshold")


class UpdateItemRequest(BaseModel):
    """Partial item edit. Quantity changes only through movements."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    sku: str | None = None
    barcode: str | None = None
    category: str | None = None
    location: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    max_quantity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
