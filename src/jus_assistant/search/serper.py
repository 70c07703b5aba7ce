"""Serper API provider for legal web search."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from ..config import Settings
from ..schemas import SearchResult
from .formatting import format_results

logger = logging.getLogger(__name__)


class SearchProviderError(Exception):
    """Error from the search provider."""

    def __init__(self, message: str, status_code: int | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


def build_site_query(query: str, domains: Sequence[str]) -> str:
    """Restrict a free-text query to the trusted domains.

    >>> build_site_query("ekteskapsloven gjeld", ["jusinfo.no", "lovdata.no"])
    'site:jusinfo.no OR site:lovdata.no ekteskapsloven gjeld'
    """
    restriction = " OR ".join(f"site:{domain}" for domain in domains)
    if not restriction:
        return query
    return f"{restriction} {query}"


def _to_result(item: dict[str, Any]) -> SearchResult:
    return SearchResult(
        title=item.get("title") or "",
        link=item.get("link") or "",
        snippet=item.get("snippet") or "",
    )


class SerperSearchClient:
    """Google search through Serper, narrowed to a fixed set of domains."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = settings.serper_api_key
        self._url = settings.serper_url
        self._domains = list(settings.trusted_domains)
        self._result_count = settings.search_result_count
        self._timeout = settings.search_timeout_seconds
        self._transport = transport

    @property
    def domains(self) -> list[str]:
        return list(self._domains)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def search(self, query: str) -> list[SearchResult]:
        """Return organic results for ``query`` in provider order.

        Without an API key this returns an empty list and never touches the
        network. Non-success responses and transport failures raise
        :class:`SearchProviderError`.
        """
        if not self._api_key:
            logger.warning("[SEARCH] SERPER_API_KEY is not set; returning no results")
            return []

        payload = {
            "q": build_site_query(query, self._domains),
            "num": self._result_count,
        }
        headers = {
            "X-API-KEY": self._api_key,
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            try:
                response = await client.post(self._url, headers=headers, json=payload)
            except httpx.HTTPError as exc:
                raise SearchProviderError(f"Serper request failed: {exc}", cause=exc) from exc

        if not response.is_success:
            raise SearchProviderError(
                f"Serper API error ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise SearchProviderError("Serper returned a non-JSON body", cause=exc) from exc

        if not isinstance(body, dict):
            raise SearchProviderError(f"Serper returned an unexpected body: {type(body).__name__}")

        organic = body.get("organic") or []
        results = [_to_result(item) for item in organic if isinstance(item, dict)]
        logger.info("[SEARCH] %d result(s) for query=%r", len(results), query)
        return results

    async def search_legal_sources(self, query: str) -> str:
        """Search and render the results as a single text block for the model."""
        results = await self.search(query)
        return format_results(results, self._domains)
