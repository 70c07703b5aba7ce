"""Rendering of search results into model context text."""

from __future__ import annotations

from typing import Sequence

from ..schemas import SearchResult

DEFAULT_DOMAINS = ("jusinfo.no", "lovdata.no")


def no_results_message(domains: Sequence[str] = DEFAULT_DOMAINS) -> str:
    return f"No results found on {' or '.join(domains)} for this query."


def format_result(result: SearchResult) -> str:
    return f"Title: {result.title}\nLink: {result.link}\nSnippet: {result.snippet}"


def format_results(results: Sequence[SearchResult], domains: Sequence[str] = DEFAULT_DOMAINS) -> str:
    if not results:
        return no_results_message(domains)
    return "\n\n".join(format_result(result) for result in results)
