"""Web research port."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SearchResult:
    """A single web search hit.

    Attributes:
        title: Page title.
        url: Page URL.
        content: Relevant excerpt.
        score: Provider relevance score.
    """

    title: str
    url: str
    content: str
    score: float = 0.0


@dataclass(frozen=True)
class SearchResponse:
    """Results of one search query.

    Attributes:
        query: The query that was searched.
        answer: Provider-generated short answer, if any.
        results: Hits in relevance order.
    """

    query: str
    answer: str | None = None
    results: tuple[SearchResult, ...] = field(default_factory=tuple)


@runtime_checkable
class WebResearchProtocol(Protocol):
    """Protocol for web search providers."""

    async def search(self, query: str, max_results: int = 3) -> SearchResponse:
        """Search the web.

        Args:
            query: Free-text query, typically a claim to check.
            max_results: Maximum number of hits.

        Raises:
            ResearchFailureError: If the provider call fails.
        """
        ...
