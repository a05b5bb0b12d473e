"""Unit tests for the summarization service."""

from unittest.mock import AsyncMock

import pytest

from abstract_summarizer.core.errors import LLMAppError
from abstract_summarizer.services.summarization_service import (
    PROMPT_INSTRUCTIONS,
    SummarizationService,
    build_prompt,
)


def test_build_prompt_appends_abstract_verbatim() -> None:
    abstract = "  Tau PET signal rose.\nCognition fell.  "

    prompt = build_prompt(abstract)

    assert prompt.startswith("Summarize the following abstract in 2-3 sentences")
    assert prompt == f"{PROMPT_INSTRUCTIONS}\n\n{abstract}"
    assert "Do NOT add information" in prompt


@pytest.mark.asyncio
async def test_summarize_delegates_to_client(fake_client) -> None:
    service = SummarizationService(client=fake_client)

    summary = await service.summarize("Abstract text.")

    assert summary == fake_client.summary
    assert fake_client.prompts == [build_prompt("Abstract text.")]


@pytest.mark.asyncio
async def test_summarize_propagates_upstream_errors(fake_client) -> None:
    fake_client.generate = AsyncMock(
        side_effect=LLMAppError(code="upstream_error", message="Hugging Face API error")
    )
    service = SummarizationService(client=fake_client)

    with pytest.raises(LLMAppError):
        await service.summarize("Abstract text.")
