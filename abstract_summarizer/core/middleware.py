"""HTTP middleware for request ID propagation and correlation.

Every response carries the request id (taken from the incoming header or
freshly generated) and the total handling time. Log lines emitted while the
request is in flight are tagged with the same id, including the one for an
unexpected error, which is turned into the generic 500 body here.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from abstract_summarizer.core.config import settings
from abstract_summarizer.core.exception_handlers import general_exception_handler
from abstract_summarizer.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id to the context and echo it on the response.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with ``X-Request-ID`` (configurable
            via LOG_REQUEST_ID_HEADER) and ``X-Request-Duration-ms`` headers.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception as exc:
        # Starlette runs the app-level Exception handler outside this
        # middleware, after the request id is gone; render it here instead.
        response = await general_exception_handler(request, exc)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
