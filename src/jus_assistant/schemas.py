from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

THREAD_ID_HEADER = "x-thread-id"


class ChatRequest(BaseModel):
    """Message submission for one conversation turn."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    thread_id: str | None = Field(
        default=None,
        alias="threadId",
        description="Thread returned by a previous turn; omitted on the first message",
    )


class SearchRequest(BaseModel):
    query: str | None = None


class SearchResult(BaseModel):
    """Single organic hit from the search provider."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    link: str = ""
    snippet: str = ""


class SearchResponse(BaseModel):
    results: list[SearchResult]


class SearchLegalArgs(BaseModel):
    """Arguments accepted by the search_legal tool."""

    query: str = Field(..., description="Søkeord eller spørsmål.")


class HealthResponse(BaseModel):
    status: str = "ok"
