"""Tests for the terminal chat client session."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import httpx
import pytest

import jus_assistant
from jus_assistant.client import ChatClientError, ChatSession


def _server(requests: list):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append(body)
        if not body.get("message"):
            return httpx.Response(400, json={"detail": "Message is required"})
        thread_id = body.get("threadId") or "thread_new"
        return httpx.Response(
            200,
            headers={"x-thread-id": thread_id, "content-type": "text/plain; charset=utf-8"},
            content=f"Svar på: {body['message']}".encode(),
        )

    return httpx.MockTransport(handler)


class TestChatSession:
    @pytest.mark.asyncio
    async def test_remembers_thread_between_turns(self):
        requests: list = []
        async with httpx.AsyncClient(transport=_server(requests)) as http:
            session = ChatSession("http://testserver/", http)

            first = await session.send("Hei")
            second = await session.send("Og så?")

        assert first == "Svar på: Hei"
        assert second == "Svar på: Og så?"
        assert session.thread_id == "thread_new"
        assert requests == [{"message": "Hei"}, {"message": "Og så?", "threadId": "thread_new"}]

    @pytest.mark.asyncio
    async def test_streams_chunks_to_callback(self):
        chunks: list[str] = []
        async with httpx.AsyncClient(transport=_server([])) as http:
            session = ChatSession("http://testserver", http, thread_id="thread_1")

            answer = await session.send("Hei", on_text=chunks.append)

        assert "".join(chunks) == answer

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        async with httpx.AsyncClient(transport=_server([])) as http:
            session = ChatSession("http://testserver", http)

            with pytest.raises(ChatClientError) as excinfo:
                await session.send("")

        assert excinfo.value.status_code == 400
        assert session.thread_id is None


class TestClientImports:
    def test_does_not_load_server_stack(self):
        """The terminal client must not pull in the web server or the OpenAI SDK."""
        code = (
            "import sys, jus_assistant.client; "
            "print(sorted(m for m in ('jus_assistant.api', 'fastapi', 'openai') if m in sys.modules))"
        )
        env = {**os.environ, "PYTHONPATH": str(Path(jus_assistant.__file__).resolve().parents[1])}

        result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, env=env, check=True)

        assert result.stdout.strip() == "[]"
