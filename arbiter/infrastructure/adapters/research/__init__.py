"""Web research adapters."""

from arbiter.infrastructure.adapters.research.tavily_research import TavilyResearch

__all__: list[str] = ["TavilyResearch"]
