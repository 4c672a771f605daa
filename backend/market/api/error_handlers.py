"""Error Handlers: map exceptions escaping the routes onto the market error envelope.

Invariants:
    - MarketError → its own http_status and to_response() body
    - Client-side MarketErrors (4xx) are logged at WARNING, server-side (5xx) at ERROR
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Anything else → 500 INTERNAL_ERROR, no internal details in the body
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from market.core.errors import ErrorCategory, ErrorSeverity, MarketError

logger = logging.getLogger(__name__)


def market_error_log_level(exc: MarketError) -> int:
    """Rejections the caller can fix are warnings; storage and timeouts are errors."""
    if exc.http_status < status.HTTP_500_INTERNAL_SERVER_ERROR:
        return logging.WARNING
    return logging.ERROR


async def handle_market_error(request: Request, exc: MarketError) -> JSONResponse:
    logger.log(
        market_error_log_level(exc),
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    logger.warning(
        f"Rejected request body on {request.url.path}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketError, handle_market_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
