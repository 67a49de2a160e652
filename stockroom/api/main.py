"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom import __version__
from stockroom.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockroom.api.middleware.error_handler import setup_exception_handlers
from stockroom.api.routes import (
    alerts_router,
    dashboard_router,
    health_router,
    items_router,
    movements_router,
    notifications_router,
)
from stockroom.config import configure_logging, get_logger, get_settings
from stockroom.core.services import CachedReferenceResolver
from stockroom.infrastructure.storage.sqlite import ConnectionPool, SQLiteReferenceResolver
from stockroom.infrastructure.storage.sqlite.migrations.migrator import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Runs migrations, opens the connection pool and shares it on app.state;
    closes it on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        await run_migrations(settings.storage.db_path)
        logger.info("database_initialized")

        pool = ConnectionPool.from_settings(settings.storage)
        await pool.initialize()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    app.state.pool = pool
    if settings.cache.reference_ttl > 0:
        app.state.reference_resolver = CachedReferenceResolver(
            SQLiteReferenceResolver(pool),
            ttl=settings.cache.reference_ttl,
            max_size=settings.cache.reference_cache_size,
        )

    logger.info("application_started")

    try:
        yield
    finally:
        logger.info("application_stopping")
        await pool.close()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Stockroom Inventory API",
        description="Stock items, movements, alerts and dashboard rollups",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(movements_router)
    app.include_router(items_router)
    app.include_router(alerts_router)
    app.include_router(dashboard_router)
    app.include_router(notifications_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {
            "status": "healthy",
            "version": __version__,
        }

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Run the API server."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "stockroom.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    main()
