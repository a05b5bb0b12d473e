from typing import Annotated, Callable

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from abstract_summarizer.adapters.llm.base import AbstractSummarizationClient
from abstract_summarizer.adapters.llm.factory import create_summarization_client
from abstract_summarizer.core.errors import ValidationAppError
from abstract_summarizer.core.rate_limit import enforce_rate_limit
from abstract_summarizer.schemas.summarize import SummarizeRequest, SummarizeResponse
from abstract_summarizer.services.summarization_service import SummarizationService

router = APIRouter(tags=["Summarize"])

ClientFactory = Callable[[], AbstractSummarizationClient]


def get_client_factory() -> ClientFactory:
    """Dependency returning the callable that builds the upstream client.

    The client is built lazily, after the body has been validated, so a
    missing token is reported only for otherwise well-formed requests.
    """
    return create_summarization_client


async def _parse_body(request: Request) -> SummarizeRequest:
    raw = await request.body()
    try:
        return SummarizeRequest.model_validate_json(raw)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_request",
            message="abstract is required",
        ) from exc


@router.post(
    "/api/summarize",
    response_model=SummarizeResponse,
    dependencies=[Depends(enforce_rate_limit)],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SummarizeRequest.model_json_schema()}},
        }
    },
)
async def summarize(
    request: Request,
    client_factory: Annotated[ClientFactory, Depends(get_client_factory)],
) -> SummarizeResponse:
    """Summarize a research abstract.

    The per-client rate limit is enforced before the body is read; throttled
    requests never reach the upstream model.

    Returns:
        SummarizeResponse: The generated summary.

    Raises:
        ValidationAppError: 400 if the body is not ``{"abstract": "<text>"}``.
        ConfigurationAppError: 500 if no upstream token is configured.
        LLMAppError: 500 if the upstream call fails.
    """
    payload = await _parse_body(request)

    service = SummarizationService(client=client_factory())
    summary = await service.summarize(payload.abstract)
    return SummarizeResponse(summary=summary)
