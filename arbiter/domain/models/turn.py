"""Turn domain model.

A turn is one party's statement within a dispute. Turns are immutable once
created and are ordered by a strictly increasing ``order`` value that is
unique within the dispute.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class Speaker(Enum):
    """The two fixed participant roles of a dispute."""

    PERSON_A = "person_a"
    PERSON_B = "person_b"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Turn:
    """A single finalized statement in a dispute.

    Attributes:
        id: Unique identifier.
        dispute_id: The dispute this turn belongs to.
        speaker: Which participant spoke.
        text: Transcribed or typed statement (never empty).
        order: Position within the dispute, starting at 1.
        audio_key: Storage key of the recorded audio, if any.
        audio_url: Signed playback URL issued when the audio was published.
        duration_seconds: Length of the recording, if known.
        created_at: When the turn was appended (UTC).
    """

    id: UUID
    dispute_id: UUID
    speaker: Speaker
    text: str
    order: int
    audio_key: str | None = field(default=None)
    audio_url: str | None = field(default=None)
    duration_seconds: int | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate turn fields."""
        if not self.text or not self.text.strip():
            raise ValueError("Turn text must not be empty")
        if self.order < 1:
            raise ValueError(f"Turn order must be >= 1, got {self.order}")
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
