"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module so
no developer .env file leaks into the test run.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("LLM_PROVIDER", "hf-inference")
os.environ.setdefault("HF_API_TOKEN", "hf_test_token_123")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient  # noqa: E402
from abstract_summarizer.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter  # noqa: E402
from abstract_summarizer.api.routes.summarize import get_client_factory  # noqa: E402
from abstract_summarizer.core.app_factory import create_app  # noqa: E402


class FakeSummarizationClient(AbstractSummarizationClient):
    """Records prompts and answers with a canned summary."""

    def __init__(self, summary: str = "The study found a robust effect.") -> None:
        self.summary = summary
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.summary


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(
        limit=10,
        window_seconds=60,
        cleanup_interval_seconds=300,
        clock=clock,
    )


@pytest.fixture
def fake_client() -> FakeSummarizationClient:
    return FakeSummarizationClient()


@pytest.fixture
def app(limiter: InMemoryFixedWindowRateLimiter, fake_client: FakeSummarizationClient) -> FastAPI:
    application = create_app(rate_limiter=limiter)
    application.dependency_overrides[get_client_factory] = lambda: (lambda: fake_client)
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
