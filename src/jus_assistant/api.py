from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from .config import Settings, get_settings
from .conversation import ConfigurationError, ConversationServiceError
from .orchestrator import RunOrchestrator
from .schemas import THREAD_ID_HEADER, ChatRequest, HealthResponse, SearchRequest, SearchResponse
from .search import SearchProviderError
from .services import build_orchestrator, build_search_client, get_conversation_service
from .types import RunStatus

router = APIRouter()

logger = logging.getLogger(__name__)


async def _relay_turn(orchestrator: RunOrchestrator, thread_id: str, settings: Settings) -> AsyncIterator[str]:
    """Yield the answer text; a failure after partial output appends the apology instead of raising."""
    stream = orchestrator.stream(thread_id)
    try:
        async for chunk in stream:
            yield chunk
    except Exception:
        logger.exception("Streaming failed on thread %s", thread_id)
        yield settings.stream_error_message
        return

    if stream.outcome.status is not RunStatus.COMPLETED:
        logger.warning("Run on thread %s ended as %s", thread_id, stream.outcome.status.value)
        yield settings.stream_error_message

@router.get("/healthz", response_model=HealthResponse)
def healthcheck() -> HealthResponse:
    return HealthResponse()

@router.post("/api/chat")
async def chat(
    payload: ChatRequest,
    settings: Settings = Depends(get_settings),
):
    """Append the user's message to the thread and stream the assistant's answer.

    The thread id (new or reused) is returned in the ``x-thread-id`` header.
    """
    if not payload.message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    try:
        conversation = get_conversation_service(settings)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    thread_id = payload.thread_id
    try:
        if not thread_id:
            thread_id = await conversation.create_thread()
        await conversation.add_user_message(thread_id, payload.message)
    except ConversationServiceError as exc:
        logger.error("Conversation service error: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    orchestrator = build_orchestrator(settings, conversation)
    return StreamingResponse(
        _relay_turn(orchestrator, thread_id, settings),
        media_type="text/plain; charset=utf-8",
        headers={
            THREAD_ID_HEADER: thread_id,
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )

@router.post("/api/search", response_model=SearchResponse)
async def search(
    payload: SearchRequest,
    settings: Settings = Depends(get_settings),
) -> SearchResponse:
    if not payload.query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query is required")

    client = build_search_client(settings)
    try:
        results = await client.search(payload.query)
    except SearchProviderError as exc:
        logger.error("Search API error: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return SearchResponse(results=results)
