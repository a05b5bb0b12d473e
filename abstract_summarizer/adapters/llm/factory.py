"""Factory for creating summarization client instances."""

import logging

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient
from abstract_summarizer.adapters.llm.hf_inference import HFInferenceClient
from abstract_summarizer.adapters.llm.openai_client import OpenAIClient
from abstract_summarizer.core.config import DEFAULT_HF_BASE_URL, DEFAULT_OPENAI_BASE_URL, settings
from abstract_summarizer.core.errors import ConfigurationAppError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("hf-inference", "openai")


def create_summarization_client() -> AbstractSummarizationClient:
    """Instantiate the configured client.

    Reads configuration from ``abstract_summarizer.core.config.settings`` at
    call time, so a token added to the environment does not need a new
    process image, only fresh settings.

    Returns:
        AbstractSummarizationClient: Configured client instance.

    Raises:
        ConfigurationAppError: If the token is missing or the provider unknown.
    """
    cfg = settings.llm
    provider = cfg.provider.lower()

    if not cfg.api_key:
        logger.error(
            "llm.missing_api_key",
            extra={"provider": provider, "hint": "set HF_API_TOKEN or LLM_API_KEY"},
        )
        raise ConfigurationAppError(
            code="llm_missing_api_key",
            message="Service configuration error",
        )

    if provider == "hf-inference":
        return HFInferenceClient(
            api_token=cfg.api_key,
            model_id=cfg.model,
            base_url=cfg.base_url or DEFAULT_HF_BASE_URL,
            timeout_seconds=cfg.timeout_seconds,
            max_new_tokens=cfg.max_new_tokens,
            num_beams=cfg.num_beams,
            do_sample=cfg.do_sample,
        )

    if provider == "openai":
        return OpenAIClient(
            api_key=cfg.api_key,
            model=cfg.model,
            base_url=cfg.base_url or DEFAULT_OPENAI_BASE_URL,
            timeout_seconds=cfg.timeout_seconds,
            max_tokens=cfg.max_new_tokens,
        )

    logger.error("llm.unknown_provider", extra={"provider": provider})
    raise ConfigurationAppError(
        code="llm_unknown_provider",
        message="Service configuration error",
        details={"hint": f"Unknown LLM provider '{provider}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}"},
    )
