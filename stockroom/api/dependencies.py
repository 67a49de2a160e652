"""
Dependency injection container for FastAPI.

Stores are built per request around the connection pool that the
application lifespan places on ``app.state``.
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request, status

from stockroom.application.use_cases import (
    CreateItemUseCase,
    DeleteMovementUseCase,
    PostMovementUseCase,
    UpdateItemUseCase,
    UpdateMovementUseCase,
)
from stockroom.config import Settings, get_logger, get_settings
from stockroom.core.entities.reference import CurrentUser
from stockroom.core.interfaces import IReferenceResolver
from stockroom.core.services import AlertAggregator, DashboardService, MovementEngine
from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAlertSignalStore,
    SQLiteDashboardStore,
    SQLiteItemStore,
    SQLiteMovementStore,
    SQLiteNotificationStore,
    SQLiteReferenceResolver,
    SQLiteStockLedger,
)

logger = get_logger(__name__)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_pool(request: Request) -> ConnectionPool:
    """Connection pool created by the application lifespan."""
    return request.app.state.pool


# Current user
def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> CurrentUser | None:
    """
    Identity forwarded by the session layer in X-User-Id / X-User-Role.

    A missing or malformed id means an anonymous request.
    """
    if not x_user_id:
        return None
    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning("invalid_user_header", value=x_user_id[:32])
        return None
    return CurrentUser(id=user_id, role=x_user_role or "user")


def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


# Store dependencies
def get_movement_store(pool: ConnectionPool = Depends(get_pool)) -> SQLiteMovementStore:
    return SQLiteMovementStore(pool)


def get_item_store(pool: ConnectionPool = Depends(get_pool)) -> SQLiteItemStore:
    return SQLiteItemStore(pool)


def get_alert_signal_store(pool: ConnectionPool = Depends(get_pool)) -> SQLiteAlertSignalStore:
    return SQLiteAlertSignalStore(pool)


def get_dashboard_store(pool: ConnectionPool = Depends(get_pool)) -> SQLiteDashboardStore:
    return SQLiteDashboardStore(pool)


def get_notification_store(
    pool: ConnectionPool = Depends(get_pool),
) -> SQLiteNotificationStore:
    return SQLiteNotificationStore(pool)


def get_reference_resolver(
    request: Request,
    pool: ConnectionPool = Depends(get_pool),
) -> IReferenceResolver:
    """Shared cached resolver when the lifespan built one, else a direct one."""
    resolver = getattr(request.app.state, "reference_resolver", None)
    return resolver or SQLiteReferenceResolver(pool)


# Service dependencies
def get_movement_engine(
    store: SQLiteMovementStore = Depends(get_movement_store),
    resolver: IReferenceResolver = Depends(get_reference_resolver),
) -> MovementEngine:
    return MovementEngine(store, SQLiteStockLedger(), resolver)


def get_alert_aggregator(
    store: SQLiteAlertSignalStore = Depends(get_alert_signal_store),
    settings: Settings = Depends(get_app_settings),
) -> AlertAggregator:
    return AlertAggregator(store, settings.alerts)


def get_dashboard_service(
    store: SQLiteDashboardStore = Depends(get_dashboard_store),
) -> DashboardService:
    return DashboardService(store)


# Use case dependencies
def get_post_movement_use_case(
    engine: MovementEngine = Depends(get_movement_engine),
) -> PostMovementUseCase:
    return PostMovementUseCase(engine)


def get_update_movement_use_case(
    engine: MovementEngine = Depends(get_movement_engine),
) -> UpdateMovementUseCase:
    return UpdateMovementUseCase(engine)


def get_delete_movement_use_case(
    engine: MovementEngine = Depends(get_movement_engine),
) -> DeleteMovementUseCase:
    return DeleteMovementUseCase(engine)


def get_create_item_use_case(
    store: SQLiteItemStore = Depends(get_item_store),
    resolver: IReferenceResolver = Depends(get_reference_resolver),
    engine: MovementEngine = Depends(get_movement_engine),
) -> CreateItemUseCase:
    return CreateItemUseCase(store, resolver, engine)


def get_update_item_use_case(
    store: SQLiteItemStore = Depends(get_item_store),
    resolver: IReferenceResolver = Depends(get_reference_resolver),
) -> UpdateItemUseCase:
    return UpdateItemUseCase(store, resolver)
