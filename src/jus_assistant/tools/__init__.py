"""Tool registry for the legal assistant."""

from __future__ import annotations

from typing import Any, Dict

from langchain_core.tools import BaseTool
from langchain_core.utils.function_calling import convert_to_openai_tool

from ..search import SerperSearchClient
from .kinds import ToolKind
from .search_legal_tool import SEARCH_LEGAL_DESCRIPTION, build_search_legal_tool


def get_registered_tools(search: SerperSearchClient) -> Dict[ToolKind, BaseTool]:
    """Return every tool the assistant may call, keyed by kind."""

    return {
        ToolKind.SEARCH_LEGAL: build_search_legal_tool(search),
    }


def get_function_tool_schemas(search: SerperSearchClient) -> list[dict[str, Any]]:
    """OpenAI function-tool definitions for the assistant configuration."""

    return [convert_to_openai_tool(tool) for tool in get_registered_tools(search).values()]


__all__ = [
    "SEARCH_LEGAL_DESCRIPTION",
    "ToolKind",
    "build_search_legal_tool",
    "get_function_tool_schemas",
    "get_registered_tools",
]
