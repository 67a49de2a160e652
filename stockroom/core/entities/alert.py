"""Alert entities. Alerts are synthesized at query time and never stored."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Signal source an alert was derived from."""

    LOW_STOCK = "low_stock"
    OVERSTOCK = "overstock"
    MOVEMENT = "movement"
    SUPPLIER_NEW = "supplier_new"
    REORDER_PENDING = "reorder_pending"
    INTERNAL_WARNING = "internal_warning"


class AlertLevel(str, Enum):
    """Severity shown to the user."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Alert(BaseModel):
    """
    A single entry of the alerts feed.

    The id is synthetic (``<source-tag>-<row id>``) and only stable while the
    underlying row keeps the same state.
    """

    id: str
    type: AlertType
    title: str
    message: str | None = None
    level: AlertLevel = AlertLevel.INFO
    created_at: datetime | None = None
    meta: dict[str, Any] = Field(default_factory=dict)
