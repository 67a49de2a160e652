"""Alerts feed endpoint."""

from fastapi import APIRouter, Depends

from stockroom.api.dependencies import get_alert_aggregator
from stockroom.application.dto.responses import AlertListResponse, AlertResponse
from stockroom.core.services import AlertAggregator

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    aggregator: AlertAggregator = Depends(get_alert_aggregator),
) -> AlertListResponse:
    """
    Merged alerts from all sources, newest first.

    Sources that fail show up as internal_warning entries; the endpoint
    itself does not fail on a broken source.
    """
    alerts = await aggregator.list_alerts()
    return AlertListResponse(
        alerts=[
            AlertResponse(
                id=a.id,
                type=a.type.value,
                title=a.title,
                message=a.message,
                level=a.level.value,
                created_at=a.created_at,
                meta=a.meta,
            )
            for a in alerts
        ]
    )
