"""Search criteria accepted by list operations."""

from datetime import datetime

from pydantic import BaseModel, Field

from stockroom.core.entities.inventory import MovementType


class MovementFilter(BaseModel):
    """Criteria for listing movements. Unset fields do not filter."""

    search: str | None = None  # item name, reference number or notes
    movement_type: MovementType | None = None
    item_id: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class ItemFilter(BaseModel):
    """Criteria for listing stock items."""

    search: str | None = None  # name, sku or barcode
    category_id: int | None = None
    location_id: int | None = None
    include_inactive: bool = False
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
