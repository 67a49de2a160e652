"""Response DTOs for API endpoints.

Pydantic v2 models for API responses.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MovementResponse(BaseModel):
    """A stock movement with display names."""

    id: int = Field(..., description="Movement ID")
    item_id: int = Field(..., description="Stock item ID")
    item_name: str | None = Field(default=None, description="Item name")
    movement_type: str = Field(..., description="IN or OUT")
    quantity: int = Field(..., description="Moved quantity")
    unit_price: float | None = Field(default=None, description="Price per unit")
    total_value: float | None = Field(default=None, description="quantity * unit_price")
    notes: str | None = None
    reference_number: str | None = None
    location: str | None = None
    supplier: str | None = None
    customer: str | None = None
    user_name: str | None = Field(default=None, description="Creator name")
    movement_date: dt.datetime
    created_by: int | None = None
    created_at: dt.datetime
    updated_at: dt.datetime | None = None


class ItemResponse(BaseModel):
    """A stock item."""

    id: int = Field(..., description="Item ID")
    name: str
    description: str | None = None
    sku: str | None = None
    barcode: str | None = None
    category: str | None = None
    location: str | None = None
    unit_price: float
    quantity: int
    min_quantity: int | None = None
    max_quantity: int | None = None
    total_value: float = Field(..., description="quantity * unit_price")
    is_low_stock: bool
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class AlertResponse(BaseModel):
    """One entry of the alerts feed."""

    id: str
    type: str
    title: str
    message: str | None = None
    level: str
    created_at: dt.datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class AlertListResponse(BaseModel):
    """The merged alerts feed."""

    alerts: list[AlertResponse] = Field(default_factory=list)


class DashboardStatsResponse(BaseModel):
    """Dashboard counters, serialized in camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(0, alias="totalItems")
    low_stock_items: int = Field(0, alias="lowStockItems")
    total_value: float = Field(0.0, alias="totalValue")
    recent_movements: int = Field(0, alias="recentMovements")


class ChartPointResponse(BaseModel):
    """Stock in/out totals for one day."""

    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    day: str
    stock_in: int = Field(0, alias="stockIn")
    stock_out: int = Field(0, alias="stockOut")


class NotificationResponse(BaseModel):
    """A notification as shown to its reader."""

    id: int
    title: str
    message: str
    type: str
    timestamp: dt.datetime
    read: bool
    meta: dict[str, Any] | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Standard error response with actionable hints."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    hint: str | None = Field(default=None, description="Suggested action to resolve the error")
    detail: str | dict | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path that caused the error")
    timestamp: str | None = Field(default=None, description="ISO timestamp of the error")


class ProviderHealthResponse(BaseModel):
    """Health status of a dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Response for health check."""

    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Server uptime")
    database: ProviderHealthResponse | None = None
