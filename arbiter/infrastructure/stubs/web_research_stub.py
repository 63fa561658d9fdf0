"""Scripted web research provider for development and testing."""

from __future__ import annotations

from arbiter.application.ports.web_research import (
    SearchResponse,
    SearchResult,
    WebResearchProtocol,
)
from arbiter.domain.errors.pipeline import ResearchFailureError


class WebResearchStub(WebResearchProtocol):
    """Returns one canned hit per query.

    Attributes:
        queries: Every query received, in order.
    """

    def __init__(self, fail_queries: frozenset[str] = frozenset()) -> None:
        """Initialize the stub.

        Args:
            fail_queries: Queries that raise ResearchFailureError.
        """
        self._fail_queries = fail_queries
        self.queries: list[str] = []

    async def search(self, query: str, max_results: int = 3) -> SearchResponse:
        """Return a canned response for ``query``."""
        self.queries.append(query)
        if query in self._fail_queries:
            raise ResearchFailureError(f"search failed for: {query}")
        slug = len(self.queries)
        return SearchResponse(
            query=query,
            answer=f"Sources are mixed on: {query}",
            results=(
                SearchResult(
                    title=f"Result for {query}",
                    url=f"https://example.org/fact/{slug}",
                    content=f"Background on {query}",
                    score=0.9,
                ),
            )[:max_results],
        )
