"""Adapter for the hosted conversation service (threads, runs, run events)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, AsyncIterator, Sequence

from openai import APIError, APIStatusError, AsyncOpenAI

from .config import Settings
from .types import ToolOutput

logger = logging.getLogger(__name__)

EventStream = AbstractAsyncContextManager[AsyncIterator[Any]]


class ConversationServiceError(Exception):
    """Error from the hosted conversation service."""

    def __init__(self, message: str, status_code: int | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


class ConfigurationError(ConversationServiceError):
    """Raised when credentials or the assistant id are missing."""


class ConversationService(ABC):
    """Owner of threads and runs. Run streams are opened as async context managers."""

    @abstractmethod
    async def create_thread(self) -> str:
        """Create an empty thread and return its id."""

    @abstractmethod
    async def add_user_message(self, thread_id: str, content: str) -> None:
        """Append a user message to the thread."""

    @abstractmethod
    def stream_run(self, thread_id: str) -> EventStream:
        """Start a run on the thread and stream its events."""

    @abstractmethod
    def submit_tool_outputs(self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]) -> EventStream:
        """Resume a paused run with tool outputs and stream the continuation."""

    @abstractmethod
    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        """Cancel a run that will not be resumed."""


def _wrap_error(action: str, exc: APIError) -> ConversationServiceError:
    if isinstance(exc, APIStatusError):
        return ConversationServiceError(
            f"{action} ({exc.status_code}): {exc.message}",
            status_code=exc.status_code,
            cause=exc,
        )
    return ConversationServiceError(f"{action}: {exc.message}", cause=exc)


class OpenAIConversationService(ConversationService):
    """Conversation service backed by the OpenAI Assistants API."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        if not settings.openai_api_key and client is None:
            raise ConfigurationError("OpenAI API key not configured")
        if not settings.assistant_id:
            raise ConfigurationError("Assistant ID not configured")
        self._client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        self._assistant_id = settings.assistant_id

    async def create_thread(self) -> str:
        try:
            thread = await self._client.beta.threads.create()
        except APIError as exc:
            raise _wrap_error("Failed to create thread", exc) from exc
        logger.info("Created thread %s", thread.id)
        return thread.id

    async def add_user_message(self, thread_id: str, content: str) -> None:
        try:
            await self._client.beta.threads.messages.create(thread_id, role="user", content=content)
        except APIError as exc:
            raise _wrap_error("Failed to add message", exc) from exc

    def stream_run(self, thread_id: str) -> EventStream:
        return self._client.beta.threads.runs.stream(
            thread_id=thread_id,
            assistant_id=self._assistant_id,
        )

    def submit_tool_outputs(self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]) -> EventStream:
        return self._client.beta.threads.runs.submit_tool_outputs_stream(
            run_id=run_id,
            thread_id=thread_id,
            tool_outputs=[output.as_payload() for output in outputs],
        )

    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        try:
            await self._client.beta.threads.runs.cancel(run_id, thread_id=thread_id)
        except APIError as exc:
            raise _wrap_error("Failed to cancel run", exc) from exc
