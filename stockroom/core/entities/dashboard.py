"""Dashboard rollup entities."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class DashboardStats(BaseModel):
    """Four independent rollups shown on the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(0, alias="totalItems")
    low_stock_items: int = Field(0, alias="lowStockItems")
    total_value: float = Field(0.0, alias="totalValue")
    recent_movements: int = Field(0, alias="recentMovements")


class ChartPoint(BaseModel):
    """Stock in/out totals for one day."""

    model_config = ConfigDict(populate_by_name=True)

    date: dt.date
    day: str
    stock_in: int = Field(0, alias="stockIn")
    stock_out: int = Field(0, alias="stockOut")
