"""Notification endpoints."""

from fastapi import APIRouter, Depends

from stockroom.api.dependencies import get_notification_store, require_user
from stockroom.application.dto.responses import (
    ErrorResponse,
    NotificationListResponse,
    NotificationResponse,
)
from stockroom.core.entities.notification import Notification
from stockroom.core.entities.reference import CurrentUser
from stockroom.core.exceptions import NotificationNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteNotificationStore

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _entity_to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,  # type: ignore[arg-type]
        title=n.title,
        message=n.message,
        type=n.type,
        timestamp=n.created_at,
        read=n.is_read,
        meta=n.meta,
    )


@router.get(
    "",
    response_model=NotificationListResponse,
    responses={401: {"model": ErrorResponse}},
)
async def list_notifications(
    user: CurrentUser = Depends(require_user),
    store: SQLiteNotificationStore = Depends(get_notification_store),
) -> NotificationListResponse:
    """The user's own and broadcast notifications, newest first."""
    notifications = await store.list_for_user(user.id, limit=50)
    return NotificationListResponse(
        notifications=[_entity_to_response(n) for n in notifications]
    )


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def mark_notification_read(
    notification_id: int,
    user: CurrentUser = Depends(require_user),
    store: SQLiteNotificationStore = Depends(get_notification_store),
) -> NotificationResponse:
    notification = await store.mark_read(notification_id, user.id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return _entity_to_response(notification)
