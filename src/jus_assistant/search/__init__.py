"""Legal web search provider and result formatting."""

from .formatting import format_result, format_results, no_results_message
from .serper import SearchProviderError, SerperSearchClient, build_site_query

__all__ = [
    "build_site_query",
    "format_result",
    "format_results",
    "no_results_message",
    "SearchProviderError",
    "SerperSearchClient",
]
