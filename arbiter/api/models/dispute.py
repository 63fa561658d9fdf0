"""Dispute, turn and verdict request/response models.

Request fields are plain optional strings. The application services
validate mode, names, speaker and persona and raise DisputeValidationError
(400).
"""

from uuid import UUID

from pydantic import BaseModel, Field

from arbiter.api.models.common import DateTimeWithZ
from arbiter.application.services.dispute_lifecycle_service import AdjudicationOutcome
from arbiter.application.services.dispute_service import DisputeDetails
from arbiter.domain.models.turn import Turn
from arbiter.domain.models.verdict import Verdict


class CreateDisputeRequest(BaseModel):
    """Start a dispute between two named people."""

    mode: str | None = Field(default=None, description="live or turn_based")
    party_a_name: str | None = None
    party_b_name: str | None = None
    persona: str | None = Field(default=None, description="Defaults to the preferred persona")


class AppendTurnRequest(BaseModel):
    """Add a statement to an open dispute.

    Either ``text`` or ``audio_base64`` is required. Audio is transcribed
    and its transcription becomes the turn text.
    """

    speaker: str | None = Field(default=None, description="person_a or person_b")
    text: str | None = None
    audio_base64: str | None = Field(default=None, description="Base64 audio or data URL")
    audio_mime_type: str | None = None
    duration_seconds: int | None = Field(default=None, ge=0)


class UploadUrlRequest(BaseModel):
    """Request a signed URL for a direct client upload."""

    filename: str = Field(..., min_length=1, max_length=200)


class TurnResponse(BaseModel):
    """A stored turn."""

    id: UUID
    speaker: str
    text: str
    order: int
    audio_url: str | None = None
    duration_seconds: int | None = None
    created_at: DateTimeWithZ

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnResponse":
        """Build from a domain turn."""
        return cls(
            id=turn.id,
            speaker=turn.speaker.value,
            text=turn.text,
            order=turn.order,
            audio_url=turn.audio_url,
            duration_seconds=turn.duration_seconds,
            created_at=turn.created_at,
        )


class VerdictResponse(BaseModel):
    """A stored verdict."""

    id: UUID
    winner: str
    winner_name: str
    rationale: str
    full_text: str
    research_performed: bool
    sources: list[str] = Field(default_factory=list)
    audio_url: str | None = None
    audio_duration_seconds: int | None = None
    created_at: DateTimeWithZ

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "VerdictResponse":
        """Build from a domain verdict."""
        return cls(
            id=verdict.id,
            winner=verdict.winner.value,
            winner_name=verdict.winner_name,
            rationale=verdict.rationale,
            full_text=verdict.raw_text,
            research_performed=verdict.research_performed,
            sources=list(verdict.sources),
            audio_url=verdict.audio_url,
            audio_duration_seconds=verdict.audio_duration_seconds,
            created_at=verdict.created_at,
        )


class DisputeResponse(BaseModel):
    """A dispute with its turns and verdict."""

    id: UUID
    mode: str
    party_a_name: str
    party_b_name: str
    persona: str
    status: str
    created_at: DateTimeWithZ
    completed_at: DateTimeWithZ | None = None
    turns: list[TurnResponse] = Field(default_factory=list)
    verdict: VerdictResponse | None = None

    @classmethod
    def from_details(cls, details: DisputeDetails) -> "DisputeResponse":
        """Build from dispute details."""
        dispute = details.dispute
        return cls(
            id=dispute.id,
            mode=dispute.mode.value,
            party_a_name=dispute.party_a_name,
            party_b_name=dispute.party_b_name,
            persona=dispute.persona.value,
            status=dispute.status.value,
            created_at=dispute.created_at,
            completed_at=dispute.completed_at,
            turns=[TurnResponse.from_turn(turn) for turn in details.turns],
            verdict=(
                VerdictResponse.from_verdict(details.verdict)
                if details.verdict is not None
                else None
            ),
        )


class CreateDisputeResponse(BaseModel):
    """A created dispute and the caller's remaining daily quota."""

    dispute: DisputeResponse
    remaining_today: int | None = Field(default=None, description="None when unlimited")


class DisputeListResponse(BaseModel):
    """The caller's disputes, newest first."""

    disputes: list[DisputeResponse]


class UploadUrlResponse(BaseModel):
    """Signed direct upload target."""

    key: str
    upload_url: str
    expires_in: int


class AdjudicationResponse(BaseModel):
    """Outcome of an adjudication."""

    verdict_id: UUID
    dispute_id: UUID
    winner: str
    winner_name: str
    rationale: str
    full_text: str
    audio_url: str | None = None
    audio_duration_seconds: int | None = None
    research_performed: bool
    sources: list[str] = Field(default_factory=list)
    completed_at: DateTimeWithZ | None = None

    @classmethod
    def from_outcome(cls, outcome: AdjudicationOutcome) -> "AdjudicationResponse":
        """Build from an adjudication outcome."""
        return cls(
            verdict_id=outcome.verdict_id,
            dispute_id=outcome.dispute_id,
            winner=outcome.winner.value,
            winner_name=outcome.winner_name,
            rationale=outcome.rationale,
            full_text=outcome.full_text,
            audio_url=outcome.audio_url,
            audio_duration_seconds=outcome.audio_duration_seconds,
            research_performed=outcome.research_performed,
            sources=list(outcome.sources),
            completed_at=outcome.completed_at,
        )


class AudioUrlResponse(BaseModel):
    """Freshly signed playback URL of a narrated verdict."""

    audio_url: str
