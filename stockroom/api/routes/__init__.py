"""API route modules."""

from stockroom.api.routes.alerts import router as alerts_router
from stockroom.api.routes.dashboard import router as dashboard_router
from stockroom.api.routes.health import router as health_router
from stockroom.api.routes.items import router as items_router
from stockroom.api.routes.movements import router as movements_router
from stockroom.api.routes.notifications import router as notifications_router

__all__ = [
    "health_router",
    "movements_router",
    "items_router",
    "alerts_router",
    "dashboard_router",
    "notifications_router",
]
