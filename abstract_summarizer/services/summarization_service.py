"""Abstract summarization service.

Builds the instruction prompt around the submitted abstract and delegates
generation to the configured upstream client.
"""

import logging
import time

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient

logger = logging.getLogger(__name__)

PROMPT_INSTRUCTIONS = (
    "Summarize the following abstract in 2-3 sentences, focusing ONLY on the main "
    "results and conclusions. "
    "Do NOT add information that is not present in the abstract."
)


def build_prompt(abstract: str) -> str:
    """Wrap the abstract with the summarization instructions.

    Args:
        abstract: Abstract text exactly as submitted.

    Returns:
        Prompt string for the upstream model.
    """
    return f"{PROMPT_INSTRUCTIONS}\n\n{abstract}"


class SummarizationService:
    """Service turning an abstract into a short summary.

    Attributes:
        client: Upstream client used for generation.
    """

    def __init__(self, client: AbstractSummarizationClient) -> None:
        self.client = client

    async def summarize(self, abstract: str) -> str:
        """Summarize an abstract.

        Args:
            abstract: Non-empty abstract text.

        Returns:
            Generated summary text.

        Raises:
            LLMAppError: If the upstream call fails or returns no text.
        """
        start = time.perf_counter()
        summary = await self.client.generate(build_prompt(abstract))

        logger.info(
            "summarize.success",
            extra={
                "abstract_chars": len(abstract),
                "summary_chars": len(summary),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return summary
