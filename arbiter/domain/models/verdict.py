"""Verdict domain model.

A verdict is the structured (and optionally narrated) outcome of
adjudicating a dispute. A dispute holds at most one verdict at a time;
re-adjudication replaces it.

Invariants:
- winner == TIE if and only if winner_name is the literal tie label.
- winner_name is resolved once, at creation time, and never re-derived.
- sources is empty unless research_performed is True.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

TIE_LABEL = "Tie"


class Winner(Enum):
    """Outcome of an adjudication."""

    PERSON_A = "person_a"
    PERSON_B = "person_b"
    TIE = "tie"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Verdict:
    """Persisted verdict of a dispute.

    Attributes:
        id: Unique identifier.
        dispute_id: The dispute this verdict belongs to.
        winner: Winning role, or TIE.
        winner_name: Denormalized display name of the winner (or "Tie").
        rationale: Model reply with the verdict line stripped.
        raw_text: Full model reply.
        research_performed: Whether a fact-checking step ran.
        sources: Ordered source references consulted during research.
        research_summary: Short digest of the research findings, if any.
        audio_key: Storage key of the narrated verdict, if narration succeeded.
        audio_url: Signed playback URL of the narration, if any.
        audio_duration_seconds: Estimated narration length, if any.
        created_at: When the verdict was produced (UTC).
    """

    id: UUID
    dispute_id: UUID
    winner: Winner
    winner_name: str
    rationale: str
    raw_text: str
    research_performed: bool = field(default=False)
    sources: tuple[str, ...] = field(default_factory=tuple)
    research_summary: str | None = field(default=None)
    audio_key: str | None = field(default=None)
    audio_url: str | None = field(default=None)
    audio_duration_seconds: int | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate the tie label invariant and research fields."""
        is_tie = self.winner is Winner.TIE
        if is_tie != (self.winner_name == TIE_LABEL):
            raise ValueError(
                f"winner={self.winner.value} is inconsistent with "
                f"winner_name={self.winner_name!r}"
            )
        if self.sources and not self.research_performed:
            raise ValueError("sources require research_performed=True")

    @property
    def has_audio(self) -> bool:
        """Return True if a narration was attached."""
        return self.audio_key is not None
