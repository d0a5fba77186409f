"""
Translate exceptions into ``ErrorResponse`` bodies.

Domain errors carry their own machine-readable ``code``; the HTTP status is
chosen from the exception family here so the core layer stays unaware of
HTTP. Every body has ``error_code``, ``message``, an optional ``hint`` and
``detail``, and the request ``path``.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ShopFloorError,
    StorageError,
    ValidationError,
    WorkflowError,
)

logger = get_logger(__name__)

# Checked in order, so subclasses must precede their bases
STATUS_BY_EXCEPTION: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (WorkflowError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValueError, status.HTTP_400_BAD_REQUEST),
)

HINTS: dict[str | int, str] = {
    "EQUIPMENT_NOT_FOUND": "Check the equipment ID and try GET /api/catalog/equipment.",
    "MATERIAL_NOT_FOUND": "Check the material ID and try GET /api/catalog/materials.",
    "QUOTE_NOT_FOUND": "Check the quote ID and try GET /api/quotes.",
    "JOB_NOT_FOUND": "Check the job ID and try GET /api/jobs.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices.",
    "TENANT_REQUIRED": "Send the tenant identifier in the X-Tenant-ID header.",
    "INVALID_STATUS_TRANSITION": "Quotes convert once; jobs complete before they are invoiced.",
    "DOCUMENT_LOCKED": "Converted quotes and completed jobs are read-only.",
    "INVOICE_LOCKED": "Paid invoices are read-only.",
    "VALIDATION_ERROR": "Check the request body fields and types.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    400: "Check the request parameters and body.",
    404: "Nothing exists at this path or ID.",
    405: "This path does not accept that HTTP method.",
    409: "The request conflicts with the current state of the resource.",
    500: "An internal error occurred. Check server logs.",
}

_CODES_BY_STATUS = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def status_for_exception(exc: Exception) -> int:
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_json(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINTS.get(error_code) or HINTS.get(status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response_for(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_for_exception(exc)
    if isinstance(exc, ShopFloorError):
        error_code, message = exc.code, exc.message
        detail = "; ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None) or None
    else:
        error_code, message, detail = type(exc).__name__, str(exc), None

    if status_code >= 500:
        logger.error(
            "request_error",
            path=request.url.path,
            error_code=error_code,
            error=message,
            traceback=traceback.format_exc(),
        )
    else:
        logger.warning("request_rejected", path=request.url.path, error_code=error_code)

    return _error_json(request, status_code, error_code, message, detail)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches whatever the registered exception handlers let through."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response_for(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShopFloorError)
    async def domain_error(request: Request, exc: ShopFloorError) -> JSONResponse:
        return error_response_for(request, exc)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = [
            f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in exc.errors()
        ]
        return _error_json(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            "; ".join(problems),
        )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_json(
            request,
            exc.status_code,
            _CODES_BY_STATUS.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail) if exc.detail else "An error occurred",
        )
