"""Streaming run orchestration with tool-call resumption."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from .conversation import ConversationService, ConversationServiceError, EventStream
from .dispatcher import ToolDispatcher
from .types import RunOutcome, RunStatus, ToolCallRequest

logger = logging.getLogger(__name__)

TextSink = Callable[[str], Awaitable[None] | None]

MESSAGE_DELTA = "thread.message.delta"
REQUIRES_ACTION = "thread.run.requires_action"

_TERMINAL_EVENTS = {
    "thread.run.completed": RunStatus.COMPLETED,
    "thread.run.failed": RunStatus.FAILED,
    "thread.run.incomplete": RunStatus.INCOMPLETE,
    "thread.run.cancelled": RunStatus.CANCELLED,
    "thread.run.expired": RunStatus.EXPIRED,
}


class OrchestratorError(Exception):
    """Raised when a turn cannot be driven to completion."""


class ToolRoundLimitExceeded(OrchestratorError):
    def __init__(self, limit: int, run_id: str | None = None):
        super().__init__(f"Run {run_id or '?'} requested more than {limit} tool round(s)")
        self.limit = limit
        self.run_id = run_id


def extract_delta_text(event: Any) -> str | None:
    """Text carried by a message delta event, or None when there is none."""
    delta = getattr(getattr(event, "data", None), "delta", None)
    content = getattr(delta, "content", None)
    if not content:
        return None
    try:
        parts = list(content)
    except TypeError:
        return None
    fragments: list[str] = []
    for part in parts:
        if getattr(part, "type", None) != "text":
            continue
        value = getattr(getattr(part, "text", None), "value", None)
        if isinstance(value, str) and value:
            fragments.append(value)
    return "".join(fragments) or None


def extract_tool_calls(event: Any) -> list[ToolCallRequest]:
    """Pending function calls of a requires-action event."""
    action = getattr(getattr(event, "data", None), "required_action", None)
    submit = getattr(action, "submit_tool_outputs", None)
    calls: list[ToolCallRequest] = []
    for tool_call in getattr(submit, "tool_calls", None) or []:
        function = getattr(tool_call, "function", None)
        calls.append(
            ToolCallRequest(
                id=tool_call.id,
                name=getattr(function, "name", "") or "",
                arguments=getattr(function, "arguments", "") or "",
            )
        )
    return calls


def _is_run_event(kind: Any) -> bool:
    return isinstance(kind, str) and kind.startswith("thread.run.") and not kind.startswith("thread.run.step.")


class RunStream:
    """Async iterator over the text of one turn.

    ``outcome`` reflects the last run event seen and is final once iteration
    has finished. A stream drives a single run; iterating it again yields
    nothing.
    """

    def __init__(self, orchestrator: "RunOrchestrator", thread_id: str) -> None:
        self.outcome = RunOutcome(thread_id=thread_id)
        self._iterator = orchestrator._consume(self.outcome)

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterator


class RunOrchestrator:
    """Drives a run to completion, resolving tool calls along the way.

    Each tool pause produces a new event stream from the hosted service; the
    streams are consumed one after another so text reaches the caller in the
    order it was generated.
    """

    def __init__(
        self,
        conversation: ConversationService,
        dispatcher: ToolDispatcher,
        max_tool_rounds: int = 8,
    ) -> None:
        self._conversation = conversation
        self._dispatcher = dispatcher
        self._max_tool_rounds = max_tool_rounds

    def stream(self, thread_id: str) -> RunStream:
        return RunStream(self, thread_id)

    async def run(self, thread_id: str, on_text: TextSink) -> RunOutcome:
        """Push-style variant of :meth:`stream`."""
        stream = self.stream(thread_id)
        async for chunk in stream:
            result = on_text(chunk)
            if inspect.isawaitable(result):
                await result
        return stream.outcome

    async def _consume(self, outcome: RunOutcome) -> AsyncIterator[str]:
        thread_id = outcome.thread_id
        pending: EventStream | None = self._conversation.stream_run(thread_id)

        try:
            while pending is not None:
                source, pending = pending, None
                async with source as events:
                    async for event in events:
                        kind = getattr(event, "event", None)

                        if kind == MESSAGE_DELTA:
                            text = extract_delta_text(event)
                            if text:
                                yield text
                            continue

                        if _is_run_event(kind):
                            outcome.run_id = getattr(event.data, "id", outcome.run_id)

                        if kind == REQUIRES_ACTION:
                            run_id = event.data.id
                            calls = extract_tool_calls(event)
                            if not calls:
                                logger.warning("[ORCHESTRATOR] requires_action without tool calls (run=%s)", run_id)
                                continue
                            if outcome.tool_rounds >= self._max_tool_rounds:
                                await self._abandon(thread_id, run_id)
                                outcome.status = RunStatus.CANCELLED
                                raise ToolRoundLimitExceeded(self._max_tool_rounds, run_id)
                            outcome.tool_rounds += 1
                            logger.info(
                                "[ORCHESTRATOR] Round %d: %d tool call(s) for run %s",
                                outcome.tool_rounds,
                                len(calls),
                                run_id,
                            )
                            outputs = await self._dispatcher.dispatch_all(calls)
                            pending = self._conversation.submit_tool_outputs(thread_id, run_id, outputs)
                            break

                        status = _TERMINAL_EVENTS.get(kind)
                        if status is not None:
                            outcome.status = status
                            if status is RunStatus.FAILED:
                                last_error = getattr(event.data, "last_error", None)
                                outcome.error = getattr(last_error, "message", None) or "Run failed"
                                logger.error("[ORCHESTRATOR] Run %s failed: %s", outcome.run_id, outcome.error)
        except (asyncio.CancelledError, GeneratorExit):
            # Caller went away; release the hosted run along with the stream.
            if outcome.run_id is not None and outcome.status is RunStatus.IN_PROGRESS:
                logger.info("[ORCHESTRATOR] Caller left; cancelling run %s", outcome.run_id)
                await asyncio.shield(self._abandon(thread_id, outcome.run_id))
                outcome.status = RunStatus.CANCELLED
            raise

        logger.info(
            "[ORCHESTRATOR] Turn finished on thread %s: status=%s rounds=%d",
            thread_id,
            outcome.status.value,
            outcome.tool_rounds,
        )

    async def _abandon(self, thread_id: str, run_id: str) -> None:
        try:
            await self._conversation.cancel_run(thread_id, run_id)
        except ConversationServiceError as exc:
            logger.warning("[ORCHESTRATOR] Could not cancel run %s: %s", run_id, exc)
