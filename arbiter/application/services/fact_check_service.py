"""Fact checking of factual claims made during a dispute.

Only runs for tiers with research enabled and when a research provider is
configured. Lookup failures are logged and skipped; a dispute is never
failed because research did not work.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from structlog import get_logger

if TYPE_CHECKING:
    from arbiter.application.ports.web_research import SearchResponse, WebResearchProtocol
    from arbiter.domain.models.turn import Turn

logger = get_logger(__name__)

# Statistics, appeals to research, dated events, absolutes
FACT_CHECKABLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d+%?\s+(?:of|percent|more|less|times)", re.IGNORECASE),
    re.compile(
        r"(?:studies?|research|scientists?|experts?)\s+(?:show|say|prove|found)",
        re.IGNORECASE,
    ),
    re.compile(r"(?:in|since|during)\s+\d{4}", re.IGNORECASE),
    re.compile(r"(?:always|never|every|no one|everyone)\s+", re.IGNORECASE),
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
MIN_SENTENCE_LENGTH = 10
MAX_FINDING_CHARS = 300


@dataclass(frozen=True)
class ResearchFindings:
    """Aggregated research over a set of claims.

    Attributes:
        summary: Claim-by-claim digest handed to the verdict generator.
        sources: Unique source URLs in first-seen order.
        claims_researched: Number of claims with a successful lookup.
    """

    summary: str
    sources: tuple[str, ...] = field(default_factory=tuple)
    claims_researched: int = 0


def extract_fact_checkable_statements(text: str) -> list[str]:
    """Pick sentences that make checkable factual claims.

    Sentences are split on runs of ``.``, ``!`` and ``?``; sentences of ten
    characters or fewer are ignored. Duplicates are removed, first
    occurrence wins.

    Args:
        text: Free text, typically all turns of a dispute.

    Returns:
        Trimmed sentences in order of appearance.
    """
    found: dict[str, None] = {}
    for sentence in _SENTENCE_SPLIT.split(text):
        stripped = sentence.strip()
        if len(stripped) <= MIN_SENTENCE_LENGTH:
            continue
        if any(pattern.search(stripped) for pattern in FACT_CHECKABLE_PATTERNS):
            found.setdefault(stripped, None)
    return list(found)


def _digest(claim: str, response: SearchResponse) -> str:
    if response.answer:
        finding = response.answer
    elif response.results:
        finding = response.results[0].content
    else:
        finding = "No relevant sources found."
    if len(finding) > MAX_FINDING_CHARS:
        finding = finding[:MAX_FINDING_CHARS].rstrip() + "..."
    return f'- Claim: "{claim}"\n  Finding: {finding}'


class FactCheckService:
    """Looks up claims with a web research provider."""

    def __init__(
        self,
        research: WebResearchProtocol,
        max_claims: int = 5,
        results_per_claim: int = 3,
    ) -> None:
        """Initialize the service.

        Args:
            research: Web search provider.
            max_claims: Claims researched per dispute.
            results_per_claim: Search hits requested per claim.
        """
        self._research = research
        self._max_claims = max_claims
        self._results_per_claim = results_per_claim

    async def research_claims(self, claims: list[str]) -> ResearchFindings:
        """Research up to ``max_claims`` claims, one search each.

        Args:
            claims: Claims to research, most relevant first.

        Returns:
            Findings for the claims whose lookup succeeded.
        """
        digests: list[str] = []
        sources: dict[str, None] = {}

        for claim in claims[: self._max_claims]:
            try:
                response = await self._research.search(
                    claim, max_results=self._results_per_claim
                )
            except Exception as exc:
                logger.warning(
                    "claim_research_failed",
                    claim=claim,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                continue

            digests.append(_digest(claim, response))
            for result in response.results:
                if result.url:
                    sources.setdefault(result.url, None)

        return ResearchFindings(
            summary="\n".join(digests),
            sources=tuple(sources),
            claims_researched=len(digests),
        )

    async def research_transcript(self, turns: Iterable[Turn]) -> ResearchFindings | None:
        """Research the checkable claims made across the turns of a dispute.

        Args:
            turns: Turns in order.

        Returns:
            Findings, or None if nothing was checkable or every lookup failed.
        """
        claims = extract_fact_checkable_statements(". ".join(turn.text for turn in turns))
        if not claims:
            logger.debug("no_fact_checkable_claims")
            return None

        findings = await self.research_claims(claims)
        logger.info(
            "transcript_researched",
            claims_found=len(claims),
            claims_researched=findings.claims_researched,
            sources=len(findings.sources),
        )
        if findings.claims_researched == 0:
            return None
        return findings
