"""Provision the vector store and the assistant definition.

Run once (or after changing the instructions or the source PDFs):

    jus-assistant-setup --sources ../kilder

The printed ``ASSISTANT_ID`` goes into ``.env`` for the server.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from openai import APIError, OpenAI
from rich.console import Console
from rich.panel import Panel

from .config import Settings, get_settings
from .prompts import get_instructions
from .services import build_search_client
from .tools import get_function_tool_schemas

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProvisionResult:
    assistant_id: str
    vector_store_id: str
    uploaded_file_ids: list[str] = field(default_factory=list)
    created_assistant: bool = False
    created_vector_store: bool = False


def collect_source_files(sources_dir: Path) -> list[Path]:
    return sorted(path for path in sources_dir.iterdir() if path.is_file() and path.suffix.lower() == ".pdf")


def build_assistant_tools(settings: Settings) -> list[dict[str, Any]]:
    """File search over the vector store plus every registered function tool."""
    return [{"type": "file_search"}, *get_function_tool_schemas(build_search_client(settings))]


def ensure_vector_store(client: OpenAI, name: str, console: Console) -> tuple[str, bool]:
    """Return ``(id, created)`` for the named store; an existing store is emptied."""
    existing = next((store for store in client.vector_stores.list() if store.name == name), None)
    if existing is None:
        console.print(f"Creating vector store [bold]{name}[/bold]...")
        store = client.vector_stores.create(name=name)
        console.print(f"[green]Created vector store:[/green] {store.id}")
        return store.id, True

    console.print(f"[green]Found existing vector store:[/green] {existing.id}")
    console.print("Clearing existing files from vector store...")
    for stored in client.vector_stores.files.list(vector_store_id=existing.id):
        client.vector_stores.files.delete(stored.id, vector_store_id=existing.id)
    console.print("[green]Vector store cleared.[/green]")
    return existing.id, False


def upload_sources(client: OpenAI, vector_store_id: str, files: Sequence[Path], console: Console) -> list[str]:
    """Upload PDFs and attach them to the store. Failed uploads are reported and skipped."""
    file_ids: list[str] = []
    for path in files:
        console.print(f"Uploading {path.name}...")
        try:
            with path.open("rb") as handle:
                uploaded = client.files.create(file=handle, purpose="assistants")
        except (APIError, OSError) as exc:
            logger.error("Failed to upload %s: %s", path, exc)
            console.print(f"[red]Failed to upload {path.name}:[/red] {exc}")
            continue
        file_ids.append(uploaded.id)
        console.print(f"[green]Uploaded[/green] {path.name} (ID: {uploaded.id})")

    if not file_ids:
        console.print("[yellow]No files were successfully uploaded.[/yellow]")
        return file_ids

    console.print(f"Adding {len(file_ids)} file(s) to vector store...")
    client.vector_stores.file_batches.create_and_poll(vector_store_id=vector_store_id, file_ids=file_ids)
    console.print("[green]Files added to vector store.[/green]")
    return file_ids


def ensure_assistant(
    client: OpenAI,
    settings: Settings,
    vector_store_id: str,
    console: Console,
) -> tuple[str, bool]:
    """Create the assistant, or refresh instructions, tools and store of an existing one."""
    instructions = get_instructions(settings.assistant_instructions)
    tools = build_assistant_tools(settings)
    tool_resources = {"file_search": {"vector_store_ids": [vector_store_id]}}

    existing = next(
        (assistant for assistant in client.beta.assistants.list() if assistant.name == settings.assistant_name),
        None,
    )
    if existing is not None:
        console.print(f"[green]Found existing assistant:[/green] {existing.id}")
        client.beta.assistants.update(
            existing.id,
            instructions=instructions,
            tools=tools,
            tool_resources=tool_resources,
        )
        console.print("Updated assistant with latest settings.")
        return existing.id, False

    console.print(f"Creating assistant [bold]{settings.assistant_name}[/bold]...")
    assistant = client.beta.assistants.create(
        name=settings.assistant_name,
        instructions=instructions,
        model=settings.assistant_model,
        tools=tools,
        tool_resources=tool_resources,
    )
    console.print(f"[green]Created assistant:[/green] {assistant.id}")
    return assistant.id, True


def provision(client: OpenAI, settings: Settings, sources_dir: Path, console: Console) -> ProvisionResult:
    files = collect_source_files(sources_dir)
    console.print(f"Found {len(files)} PDF file(s) in {sources_dir}.")

    vector_store_id, created_store = ensure_vector_store(client, settings.vector_store_name, console)
    uploaded = upload_sources(client, vector_store_id, files, console)
    assistant_id, created_assistant = ensure_assistant(client, settings, vector_store_id, console)

    return ProvisionResult(
        assistant_id=assistant_id,
        vector_store_id=vector_store_id,
        uploaded_file_ids=uploaded,
        created_assistant=created_assistant,
        created_vector_store=created_store,
    )


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Provision the legal assistant and its vector store.")
    parser.add_argument(
        "--sources",
        default=settings.sources_dir,
        help="Directory containing the source PDFs (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    console = Console()

    if not settings.openai_api_key:
        console.print("[bold red]OPENAI_API_KEY is not set in environment variables.[/bold red]")
        return 1

    sources_dir = Path(args.sources).expanduser().resolve()
    console.print(f"Checking for files in: {sources_dir}")
    if not sources_dir.is_dir():
        console.print(f"[bold red]Sources directory not found at:[/bold red] {sources_dir}")
        return 1

    client = OpenAI(api_key=settings.openai_api_key)
    try:
        result = provision(client, settings, sources_dir, console)
    except APIError as exc:
        console.print(f"[bold red]Provisioning failed:[/bold red] {exc}")
        return 1

    console.print(
        Panel.fit(
            f"[bold green]Setup complete[/bold green]\n\n"
            f"Assistant ID: {result.assistant_id}\n"
            f"Vector Store ID: {result.vector_store_id}\n\n"
            f"Add this to your .env file:\n"
            f"ASSISTANT_ID={result.assistant_id}",
            border_style="green",
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
