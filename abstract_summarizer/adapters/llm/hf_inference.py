"""Hugging Face inference router client adapter."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient
from abstract_summarizer.core.errors import LLMAppError

logger = logging.getLogger(__name__)


def extract_summary(payload: Any) -> str | None:
    """Pick the generated text out of an inference response.

    The router answers either with a single object or with a list of them,
    and text2text models use ``generated_text`` while summarization pipelines
    use ``summary_text``.

    Examples:
        >>> extract_summary([{"generated_text": "Short."}])
        'Short.'
        >>> extract_summary({"summary_text": "Short."})
        'Short.'
        >>> extract_summary([]) is None
        True
    """
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    if not isinstance(payload, dict):
        return None
    return payload.get("generated_text") or payload.get("summary_text") or None


class HFInferenceClient(AbstractSummarizationClient):
    """Client for the Hugging Face ``hf-inference`` text-generation route."""

    def __init__(
        self,
        api_token: str,
        model_id: str,
        base_url: str,
        timeout_seconds: float = 45.0,
        *,
        max_new_tokens: int = 256,
        num_beams: int = 4,
        do_sample: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_token: Hugging Face access token.
            model_id: Hub model id, appended to ``base_url``.
            base_url: Router prefix, e.g. https://router.huggingface.co/hf-inference/models.
            timeout_seconds: Timeout for the whole request.
            max_new_tokens: Generation length cap.
            num_beams: Beam search width.
            do_sample: Enable sampling.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        self.api_token = api_token
        self.model = model_id
        self.url = f"{base_url.rstrip('/')}/{model_id}"
        self.timeout_seconds = timeout_seconds
        self.parameters: dict[str, Any] = {
            "max_new_tokens": max_new_tokens,
            "num_beams": num_beams,
            "do_sample": do_sample,
        }
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        request_body = {"inputs": prompt, "parameters": self.parameters}
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                resp = await client.post(self.url, json=request_body, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(
                "hf_inference.request_failed",
                extra={"model": self.model, "error_type": type(exc).__name__},
            )
            raise LLMAppError(
                code="upstream_unavailable",
                message="Summarization service unavailable",
            ) from exc

        raw_text = resp.text

        if not resp.is_success:
            logger.error(
                "hf_inference.error_response",
                extra={
                    "model": self.model,
                    "http_status": resp.status_code,
                    "reason": resp.reason_phrase,
                    "body": raw_text,
                },
            )
            raise LLMAppError(
                code="upstream_error",
                message="Hugging Face API error",
                payload={"status": resp.status_code, "details": raw_text},
            )

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            logger.error(
                "hf_inference.invalid_json",
                extra={"model": self.model, "body_chars": len(raw_text)},
            )
            raise LLMAppError(
                code="upstream_invalid_json",
                message="Failed to parse Hugging Face response",
            ) from exc

        summary = extract_summary(data)
        if not summary:
            logger.warning(
                "hf_inference.unexpected_format",
                extra={"model": self.model, "payload_type": type(data).__name__},
            )
            raise LLMAppError(
                code="upstream_invalid_response",
                message="Invalid response from summarization service",
            )

        return summary
