"""Terminal chat client for the /api/chat endpoint."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Callable, Sequence

import httpx
from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown

from .citations import strip_citation_markers
from .config import get_settings
from .schemas import THREAD_ID_HEADER

logger = logging.getLogger(__name__)

class ChatClientError(Exception):
    """The server rejected the turn before streaming started."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

class ChatSession:
    """Remembers the thread id between turns, the same way the web client does."""

    def __init__(self, base_url: str, client: httpx.AsyncClient, thread_id: str | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self.thread_id = thread_id

    async def send(self, message: str, on_text: Callable[[str], None] | None = None) -> str:
        """Post one message and return the full answer text as streamed."""
        payload: dict[str, str] = {"message": message}
        if self.thread_id:
            payload["threadId"] = self.thread_id

        parts: list[str] = []
        async with self._client.stream("POST", f"{self._base_url}/api/chat", json=payload) as response:
            if not response.is_success:
                body = await response.aread()
                raise ChatClientError(
                    f"Chat request failed ({response.status_code}): {body.decode('utf-8', 'replace')}",
                    status_code=response.status_code,
                )
            self.thread_id = response.headers.get(THREAD_ID_HEADER) or self.thread_id
            async for text in response.aiter_text():
                parts.append(text)
                if on_text is not None:
                    on_text(text)
        return "".join(parts)

async def _repl(base_url: str, console: Console, apology: str) -> None:
    async with httpx.AsyncClient(timeout=httpx.Timeout(10.0, read=None)) as http:
        session = ChatSession(base_url, http)
        while True:
            try:
                message = console.input("[bold cyan]Du:[/bold cyan] ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                return
            if not message:
                continue
            if message in {"/exit", "/quit"}:
                return

            buffer: list[str] = []
            with Live(Markdown(""), console=console, refresh_per_second=12) as live:

                def render(chunk: str) -> None:
                    buffer.append(chunk)
                    live.update(Markdown(strip_citation_markers("".join(buffer))))

                try:
                    await session.send(message, on_text=render)
                except (ChatClientError, httpx.HTTPError) as exc:
                    logger.error("Chat turn failed: %s", exc)
                    render(apology)

def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Chat with the legal assistant from a terminal.")
    parser.add_argument("--url", default=settings.chat_server_url, help="Server base URL (default: %(default)s)")
    args = parser.parse_args(argv)

    console = Console()
    console.print("[dim]Skriv spørsmålet ditt. /exit avslutter.[/dim]")
    asyncio.run(_repl(args.url, console, settings.stream_error_message))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
