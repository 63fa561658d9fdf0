"""Tavily web search adapter (httpx)."""

from __future__ import annotations

from typing import Any

import httpx
from structlog import get_logger

from arbiter.application.ports.web_research import (
    SearchResponse,
    SearchResult,
    WebResearchProtocol,
)
from arbiter.config.settings import ResearchConfig
from arbiter.domain.errors.pipeline import ResearchFailureError

logger = get_logger(__name__)


def _to_result(item: Any) -> SearchResult:
    if not isinstance(item, dict):
        raise ResearchFailureError(f"Search result is not an object: {item!r}")
    return SearchResult(
        title=str(item.get("title") or ""),
        url=str(item.get("url") or ""),
        content=str(item.get("content") or ""),
        score=float(item.get("score") or 0.0),
    )


class TavilyResearch(WebResearchProtocol):
    """Tavily ``/search`` client."""

    def __init__(
        self,
        config: ResearchConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.api_key:
            raise ResearchFailureError("Missing API key: TAVILY_API_KEY")
        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def search(self, query: str, max_results: int = 3) -> SearchResponse:
        """Run a basic-depth search with a short provider answer."""
        payload = {
            "api_key": self._config.api_key,
            "query": query,
            "max_results": max_results,
            "search_depth": "basic",
            "include_answer": True,
        }
        try:
            response = await self._client.post(f"{self._config.base_url}/search", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ResearchFailureError(f"Search failed: {exc}") from exc

        if not isinstance(data, dict):
            raise ResearchFailureError("Search reply is not a JSON object")
        try:
            results = tuple(_to_result(item) for item in data.get("results") or [])
        except (TypeError, ValueError) as exc:
            raise ResearchFailureError(f"Malformed search result: {exc}") from exc

        logger.debug("search_completed", query=query[:80], results=len(results))
        return SearchResponse(
            query=query,
            answer=data.get("answer") or None,
            results=results[:max_results],
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
