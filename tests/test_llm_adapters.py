"""Tests for the upstream summarization clients and their factory."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from abstract_summarizer.adapters.llm import (
    HFInferenceClient,
    OpenAIClient,
    create_summarization_client,
    extract_summary,
)
from abstract_summarizer.core.config import DEFAULT_HF_BASE_URL, DEFAULT_MODEL_ID, settings
from abstract_summarizer.core.errors import ConfigurationAppError, LLMAppError


def _hf_client(handler) -> HFInferenceClient:
    return HFInferenceClient(
        api_token="hf_secret",
        model_id="org/model",
        base_url="https://router.example/hf-inference/models/",
        transport=httpx.MockTransport(handler),
    )


class TestExtractSummary:
    @pytest.mark.parametrize(
        "payload, expected",
        [
            ([{"generated_text": "A."}], "A."),
            ({"generated_text": "B."}, "B."),
            ([{"summary_text": "C."}], "C."),
            ({"generated_text": "", "summary_text": "D."}, "D."),
            ([], None),
            ({"error": "loading"}, None),
            ("plain string", None),
            (None, None),
        ],
    )
    def test_extracts_generated_or_summary_text(self, payload, expected) -> None:
        assert extract_summary(payload) == expected


class TestHFInferenceClient:
    @pytest.mark.asyncio
    async def test_posts_prompt_with_generation_parameters(self) -> None:
        captured: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=[{"generated_text": "Plaques predict decline."}])

        summary = await _hf_client(handler).generate("PROMPT")

        assert summary == "Plaques predict decline."
        assert captured["url"] == "https://router.example/hf-inference/models/org/model"
        assert captured["auth"] == "Bearer hf_secret"
        assert captured["body"] == {
            "inputs": "PROMPT",
            "parameters": {"max_new_tokens": 256, "num_beams": 4, "do_sample": False},
        }

    @pytest.mark.asyncio
    async def test_non_success_status_raises_with_status_and_raw_body(self) -> None:
        client = _hf_client(lambda request: httpx.Response(503, text="Model is loading"))

        with pytest.raises(LLMAppError) as exc:
            await client.generate("PROMPT")

        assert exc.value.code == "upstream_error"
        assert exc.value.message == "Hugging Face API error"
        assert exc.value.payload == {"status": 503, "details": "Model is loading"}
        assert exc.value.details is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        client = _hf_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(LLMAppError, match="Failed to parse Hugging Face response") as exc:
            await client.generate("PROMPT")
        assert exc.value.code == "upstream_invalid_json"

    @pytest.mark.asyncio
    async def test_missing_text_raises(self) -> None:
        client = _hf_client(lambda request: httpx.Response(200, json=[{"score": 0.4}]))

        with pytest.raises(LLMAppError, match="Invalid response") as exc:
            await client.generate("PROMPT")
        assert exc.value.code == "upstream_invalid_response"

    @pytest.mark.asyncio
    async def test_network_failure_raises_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LLMAppError) as exc:
            await _hf_client(handler).generate("PROMPT")
        assert exc.value.code == "upstream_unavailable"


class TestOpenAIClient:
    @pytest.mark.asyncio
    async def test_returns_stripped_message_content(self) -> None:
        mock_response = MagicMock()
        mock_response.choices = [MagicMock(message=MagicMock(content="  Short summary.  "))]
        client = OpenAIClient(api_key="test-key", model="meta-llama/Llama-3.1-8B-Instruct")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=mock_response,
        ) as mock_create:
            result = await client.generate("PROMPT")

        assert result == "Short summary."
        kwargs = mock_create.call_args.kwargs
        assert kwargs["model"] == "meta-llama/Llama-3.1-8B-Instruct"
        assert kwargs["messages"][-1] == {"role": "user", "content": "PROMPT"}
        assert kwargs["max_tokens"] == 256

    @pytest.mark.asyncio
    async def test_empty_content_raises(self) -> None:
        mock_response = MagicMock()
        mock_response.choices = [MagicMock(message=MagicMock(content=None))]
        client = OpenAIClient(api_key="test-key", model="m")

        with patch.object(
            client.client.chat.completions, "create", new_callable=AsyncMock, return_value=mock_response
        ):
            with pytest.raises(LLMAppError) as exc:
                await client.generate("PROMPT")
        assert exc.value.code == "upstream_invalid_response"

    @pytest.mark.asyncio
    async def test_sdk_error_is_wrapped(self) -> None:
        client = OpenAIClient(api_key="test-key", model="m")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(LLMAppError) as exc:
                await client.generate("PROMPT")
        assert exc.value.code == "upstream_error"


class TestFactory:
    def test_defaults_to_hf_inference(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.llm, "provider", "hf-inference")
        monkeypatch.setattr(settings.llm, "model", DEFAULT_MODEL_ID)
        monkeypatch.setattr(settings.llm, "base_url", None)
        monkeypatch.setattr(settings.llm, "api_key", "hf_token")

        client = create_summarization_client()

        assert isinstance(client, HFInferenceClient)
        assert client.url == f"{DEFAULT_HF_BASE_URL}/{DEFAULT_MODEL_ID}"

    def test_openai_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.llm, "provider", "openai")
        monkeypatch.setattr(settings.llm, "model", "gpt-4o-mini")
        monkeypatch.setattr(settings.llm, "api_key", "sk-test")

        client = create_summarization_client()

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o-mini"

    def test_missing_token_raises_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.llm, "api_key", None)

        with pytest.raises(ConfigurationAppError, match="Service configuration error") as exc:
            create_summarization_client()
        assert exc.value.code == "llm_missing_api_key"

    def test_unknown_provider_raises_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.llm, "provider", "carrier-pigeon")
        monkeypatch.setattr(settings.llm, "api_key", "token")

        with pytest.raises(ConfigurationAppError) as exc:
            create_summarization_client()
        assert exc.value.code == "llm_unknown_provider"
        assert "carrier-pigeon" in exc.value.details["hint"]
