"""Summarization adapter layer - abstracts over upstream model providers."""

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient
from abstract_summarizer.adapters.llm.factory import create_summarization_client
from abstract_summarizer.adapters.llm.hf_inference import HFInferenceClient, extract_summary
from abstract_summarizer.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractSummarizationClient",
    "HFInferenceClient",
    "OpenAIClient",
    "create_summarization_client",
    "extract_summary",
]
