"""Global exception handlers for consistent error responses.

Errors leave the API with the same JSON shape, which is what the browser
client reads:

    {"error": "<human message>", "code": "<machine code>", "request_id": "..."}

An upstream HTTP failure also carries the provider status and raw body as
top-level "status" and "details" keys.

Design:
- ValidationAppError → 400
- RateLimitAppError → 429 (plus Retry-After / X-RateLimit-* headers)
- ConfigurationAppError, LLMAppError → 500
- Unexpected Exception → generic 500. request_id_middleware renders it so
  the body and headers keep the request id. The app-level registration only
  covers errors raised outside that middleware.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from abstract_summarizer.core.errors import (
    AppError,
    ConfigurationAppError,
    LLMAppError,
    RateLimitAppError,
    ValidationAppError,
)
from abstract_summarizer.core.logging import get_request_id

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (ValidationAppError, 400),
    (RateLimitAppError, 429),
    (ConfigurationAppError, 500),
    (LLMAppError, 500),
)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code (400 when unmapped)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 400


def _error_body(message: str, code: str) -> dict:
    body: dict = {"error": message, "code": code}
    request_id = get_request_id()
    if request_id:
        body["request_id"] = request_id
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with its mapped status code.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the flat error body and, for rate limiting, the
        throttling headers.
    """
    status_code = status_code_for(exc)

    logger.log(
        logging.ERROR if status_code >= 500 else logging.WARNING,
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    content = _error_body(exc.message, exc.code)
    if exc.details:
        content["details"] = exc.details
    if isinstance(exc, LLMAppError):
        content.update(exc.payload)

    headers = exc.headers if isinstance(exc, RateLimitAppError) else None
    return JSONResponse(status_code=status_code, content=content, headers=headers or None)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure for debugging while returning a generic message, so no
    stack traces or upstream internals reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "internal_server_error"),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
