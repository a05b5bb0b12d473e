"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and the
rate limiter instance) so tests can build isolated applications.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from abstract_summarizer.adapters.rate_limit.base import AbstractRateLimiter
from abstract_summarizer.api.routes import health_router, summarize_router
from abstract_summarizer.core.config import settings
from abstract_summarizer.core.exception_handlers import setup_exception_handlers
from abstract_summarizer.core.logging import configure_logging
from abstract_summarizer.core.middleware import request_id_middleware
from abstract_summarizer.core.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    limiter: AbstractRateLimiter = app.state.rate_limiter
    limiter.start_sweeper()
    try:
        yield
    finally:
        limiter.stop_sweeper(timeout=5)


def create_app(*, rate_limiter: AbstractRateLimiter | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Limiter owned by this app; built from settings if omitted.
            Its background sweeper runs for the lifetime of the app.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Abstract Summarizer API",
        description=(
            "Summarizes Alzheimer's and neurodegeneration research abstracts in "
            "2-3 sentences using a hosted text-generation model. Requests are "
            "rate limited per client address."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=_lifespan,
    )
    # Empty limiters are falsy (they define __len__).
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(settings.app)
    app.state.rate_limiter = rate_limiter

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(summarize_router)
    app.include_router(health_router)

    logger.info(
        "app.created",
        extra={
            "env": settings.app_env,
            "provider": settings.llm.provider,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
        },
    )
    return app
