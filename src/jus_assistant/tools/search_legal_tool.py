"""Tool that searches trusted Norwegian legal sources."""

from __future__ import annotations

import logging

from langchain_core.tools import StructuredTool

from ..schemas import SearchLegalArgs
from ..search import SerperSearchClient
from .kinds import ToolKind

logger = logging.getLogger(__name__)

SEARCH_LEGAL_DESCRIPTION = (
    "Søk etter juridisk informasjon på lovdata.no, SNL.no og wikipedia.org. "
    "Bruk dette til å berike svaret ditt med hvordan regelverket er fulgt i praksis."
)


def build_search_legal_tool(search: SerperSearchClient) -> StructuredTool:
    """Bind the search_legal tool to a configured search client."""

    async def search_legal(query: str) -> str:
        logger.info("[TOOL] search_legal query=%r", query)
        return await search.search_legal_sources(query)

    return StructuredTool.from_function(
        coroutine=search_legal,
        name=ToolKind.SEARCH_LEGAL.value,
        description=SEARCH_LEGAL_DESCRIPTION,
        args_schema=SearchLegalArgs,
    )
