"""Data transfer objects for the API layer."""

from stockroom.application.dto.requests import (
    CreateItemRequest,
    PostMovementRequest,
    UpdateItemRequest,
    UpdateMovementRequest,
)
from stockroom.application.dto.responses import (
    AlertListResponse,
    AlertResponse,
    ChartPointResponse,
    DashboardStatsResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    ItemResponse,
    MovementResponse,
    NotificationListResponse,
    NotificationResponse,
    ProviderHealthResponse,
)

__all__ = [
    # Requests
    "CreateItemRequest",
    "PostMovementRequest",
    "UpdateItemRequest",
    "UpdateMovementRequest",
    # Responses
    "AlertListResponse",
    "AlertResponse",
    "ChartPointResponse",
    "DashboardStatsResponse",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
    "ItemResponse",
    "MovementResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "ProviderHealthResponse",
]
