"""Shared test helpers: run-event builders and an in-memory conversation service."""

from __future__ import annotations

import json
from collections import deque
from types import SimpleNamespace
from typing import Any, Iterable, Sequence

import httpx

from jus_assistant.conversation import ConversationService
from jus_assistant.types import ToolOutput


def text_delta(value: str) -> SimpleNamespace:
    content = [SimpleNamespace(type="text", text=SimpleNamespace(value=value))]
    return SimpleNamespace(event="thread.message.delta", data=SimpleNamespace(delta=SimpleNamespace(content=content)))


def run_event(kind: str, run_id: str = "run_1", **extra: Any) -> SimpleNamespace:
    return SimpleNamespace(event=f"thread.run.{kind}", data=SimpleNamespace(id=run_id, **extra))


def requires_action(run_id: str, calls: Sequence[tuple[str, str, str]]) -> SimpleNamespace:
    """Build a requires-action event from ``(call_id, tool_name, arguments)`` triples."""
    tool_calls = [
        SimpleNamespace(id=call_id, type="function", function=SimpleNamespace(name=name, arguments=arguments))
        for call_id, name, arguments in calls
    ]
    required = SimpleNamespace(submit_tool_outputs=SimpleNamespace(tool_calls=tool_calls))
    return run_event("requires_action", run_id, required_action=required)


def search_args(query: str) -> str:
    return json.dumps({"query": query})


class FakeEventStream:
    """Async context manager over a scripted event list. Exceptions in the list are raised in place."""

    def __init__(self, events: Iterable[Any]) -> None:
        self._events = list(events)
        self.entered = False
        self.closed = False

    async def __aenter__(self):
        self.entered = True
        return self._iterate()

    async def __aexit__(self, *exc_info) -> bool:
        self.closed = True
        return False

    async def _iterate(self):
        for event in self._events:
            if isinstance(event, BaseException):
                raise event
            yield event


class FakeConversationService(ConversationService):
    """Scripted conversation service: each run start or tool submission pops the next stream."""

    def __init__(self, streams: Iterable[Iterable[Any]] = ()) -> None:
        self._streams = deque(FakeEventStream(events) for events in streams)
        self.opened: list[FakeEventStream] = []
        self.threads: list[str] = []
        self.messages: list[tuple[str, str]] = []
        self.run_starts: list[str] = []
        self.submissions: list[tuple[str, str, list[ToolOutput]]] = []
        self.cancelled: list[tuple[str, str]] = []

    def script(self, *streams: Iterable[Any]) -> None:
        self._streams.extend(FakeEventStream(events) for events in streams)

    async def create_thread(self) -> str:
        thread_id = f"thread_{len(self.threads) + 1}"
        self.threads.append(thread_id)
        return thread_id

    async def add_user_message(self, thread_id: str, content: str) -> None:
        self.messages.append((thread_id, content))

    def stream_run(self, thread_id: str) -> FakeEventStream:
        self.run_starts.append(thread_id)
        return self._next()

    def submit_tool_outputs(self, thread_id: str, run_id: str, outputs: Sequence[ToolOutput]) -> FakeEventStream:
        self.submissions.append((thread_id, run_id, list(outputs)))
        return self._next()

    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        self.cancelled.append((thread_id, run_id))

    def _next(self) -> FakeEventStream:
        stream = self._streams.popleft()
        self.opened.append(stream)
        return stream


def organic(count: int, prefix: str = "Result") -> list[dict[str, str]]:
    return [
        {
            "title": f"{prefix} {index}",
            "link": f"https://lovdata.no/{prefix.lower()}/{index}",
            "snippet": f"Snippet {index}",
            "position": index,
        }
        for index in range(1, count + 1)
    ]


def serper_transport(results_by_term: dict[str, list[dict[str, str]]], requests: list | None = None) -> httpx.MockTransport:
    """Mock Serper: the first term found in the query selects the organic results."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if requests is not None:
            requests.append({"headers": dict(request.headers), "body": body})
        for term, items in results_by_term.items():
            if term in body["q"]:
                return httpx.Response(200, json={"organic": items})
        return httpx.Response(200, json={"organic": []})

    return httpx.MockTransport(handler)
