from __future__ import annotations

from abstract_summarizer.api.routes.health import router as health_router
from abstract_summarizer.api.routes.summarize import router as summarize_router

__all__ = ["health_router", "summarize_router"]
