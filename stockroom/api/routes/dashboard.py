"""Dashboard endpoints."""

from fastapi import APIRouter, Depends, Query

from stockroom.api.dependencies import get_dashboard_service
from stockroom.application.dto.responses import ChartPointResponse, DashboardStatsResponse
from stockroom.core.services import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_stats(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStatsResponse:
    stats = await service.get_stats()
    return DashboardStatsResponse(
        total_items=stats.total_items,
        low_stock_items=stats.low_stock_items,
        total_value=stats.total_value,
        recent_movements=stats.recent_movements,
    )


@router.get("/chart", response_model=list[ChartPointResponse])
async def get_chart(
    timeframe: str = Query(default="week", description="week, month or quarter"),
    service: DashboardService = Depends(get_dashboard_service),
) -> list[ChartPointResponse]:
    """Daily stock in/out totals."""
    points = await service.get_chart(timeframe)
    return [
        ChartPointResponse(
            date=p.date,
            day=p.day,
            stock_in=p.stock_in,
            stock_out=p.stock_out,
        )
        for p in points
    ]
