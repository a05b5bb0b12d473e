"""Pydantic schemas for the summarize endpoint."""

from pydantic import BaseModel, Field


class SummarizeRequest(BaseModel):
    """Abstract submitted for summarization."""

    abstract: str = Field(
        ...,
        min_length=1,
        description="Research abstract text to summarize.",
    )


class SummarizeResponse(BaseModel):
    """Generated summary of the submitted abstract."""

    summary: str = Field(
        ...,
        description="Two to three sentence summary focused on results and conclusions.",
    )
