"""Liveness and database readiness probes."""

import time

from fastapi import APIRouter, Response, status

from src.application.dto.responses import ComponentHealthResponse, HealthResponse
from src.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _started, 3)


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=_uptime(),
    )


@router.get(
    "/db",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def db_health(response: Response) -> HealthResponse:
    """
    Round-trip a query through the connection pool.

    ``degraded`` means SQLite answers but no migration has been applied;
    an unreachable database answers 503.
    """
    from src.infrastructure.storage.sqlite import get_connection
    from src.infrastructure.storage.sqlite.migrations.migrator import get_current_version

    started = time.perf_counter()
    try:
        async with get_connection() as conn:
            version = await get_current_version(conn)
        database = ComponentHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            schema_version=version,
        )
    except Exception as e:
        logger.error("db_health_failed", error=str(e))
        database = ComponentHealthResponse(name="sqlite", available=False, error=str(e))

    if not database.available:
        health = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif database.schema_version is None:
        health = "degraded"
    else:
        health = "healthy"

    return HealthResponse(
        status=health,
        version=get_settings().app_version,
        uptime_seconds=_uptime(),
        database=database,
    )
