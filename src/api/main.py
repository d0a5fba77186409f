"""
ShopFloor HTTP application.

Run with ``uvicorn src.api.main:app`` or ``python -m src.api.main``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    catalog_router,
    health_router,
    invoices_router,
    jobs_router,
    pricing_router,
    quotes_router,
    settings_router,
)
from src.config import configure_logging, get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    catalog_router,
    settings_router,
    quotes_router,
    jobs_router,
    invoices_router,
    pricing_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate the database and open the pool before serving; close it after."""
    from src.infrastructure.storage.sqlite import close_pool, get_pool
    from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    settings = get_settings()
    logger.info(
        "application_starting",
        db_path=str(settings.storage.db_path),
        environment=settings.environment,
    )

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        raise DatabaseError(f"migration v{failed[0].version}", failed[0].error or "unknown")
    pool = await get_pool()
    logger.info("application_started", migrations_applied=len(results), pool_size=pool.size)

    try:
        yield
    finally:
        await close_pool()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="ShopFloor API",
        description="Quotes, jobs and invoices for print and fabrication shops",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Added last runs outermost: errors raised anywhere below are rendered
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    setup_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"name": "ShopFloor API", "version": settings.app_version, "docs": "/docs"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
