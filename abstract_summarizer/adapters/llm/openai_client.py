"""OpenAI-compatible chat client adapter.

Hugging Face's router (``https://router.huggingface.co/v1``) and most hosted
inference providers speak the OpenAI chat completions protocol, so the
official SDK doubles as a generic client for them.
"""

import logging

from openai import AsyncOpenAI

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient
from abstract_summarizer.core.errors import LLMAppError

logger = logging.getLogger(__name__)


class OpenAIClient(AbstractSummarizationClient):
    """Client calling chat completions and returning the message text."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
        *,
        max_tokens: int = 256,
    ) -> None:
        """Initialize the async SDK client.

        Args:
            api_key: Bearer token for the provider.
            model: Model name on the provider.
            base_url: Optional OpenAI-compatible endpoint.
            timeout_seconds: Timeout for requests in seconds.
            max_tokens: Generation length cap.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, prompt: str) -> str:
        messages = [
            {
                "role": "system",
                "content": "You summarize scientific abstracts. Answer with the summary only.",
            },
            {"role": "user", "content": prompt},
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.0,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            logger.error(
                "openai.request_failed",
                extra={"model": self.model, "error_type": type(exc).__name__},
            )
            raise LLMAppError(
                code="upstream_error",
                message="Summarization service unavailable",
                details={"provider": "openai", "model": self.model},
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise LLMAppError(
                code="upstream_invalid_response",
                message="Invalid response from summarization service",
            )

        return content.strip()
