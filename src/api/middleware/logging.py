"""Per-request structured logging."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.config import bind_request_context, clear_request_context, get_logger, get_settings

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes are polled constantly; keep them out of the info log
_QUIET_PATHS = ("/health", "/api/health")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every log event with the request id and tenant, and log each request.

    An incoming ``X-Request-ID`` is reused so ids can be traced across
    services; otherwise a short random id is generated. The id and the
    handling time are echoed back as response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        tenant_id = request.headers.get(get_settings().api.tenant_header)

        clear_request_context()
        bind_request_context(request_id=request_id, tenant_id=tenant_id)
        log = logger.debug if request.url.path.startswith(_QUIET_PATHS) else logger.info
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(elapsed_ms, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        clear_request_context()
        return response
