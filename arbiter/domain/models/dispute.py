"""Dispute domain model.

A dispute is the unit of adjudication between two named parties. It owns an
ordered collection of turns and at most one verdict.

Lifecycle:
    OPEN -> PROCESSING            adjudication starts (needs at least one turn)
    PROCESSING -> COMPLETED       verdict persisted
    PROCESSING -> OPEN            rollback after a fatal pipeline failure
    COMPLETED -> PROCESSING       re-adjudication (verdict is replaced)
    PROCESSING -> COMPLETED       rollback of a failed re-adjudication

Invariants:
- Status only moves along the transition matrix below.
- Turns may only be appended while the dispute is OPEN.
- Neither party may be named like the tie label, so a verdict can always
  tell a win from a tie by name.
- turn_sequence is the last turn order issued and never decreases, so an
  order value is never handed out twice for the same dispute.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from arbiter.domain.models.turn import Speaker
from arbiter.domain.models.verdict import TIE_LABEL

MAX_PARTY_NAME_LENGTH = 100


class DisputeMode(Enum):
    """How the statements of a dispute are captured.

    Modes:
        LIVE: Both parties are recorded in one realtime session.
        TURN_BASED: Parties alternate, one statement at a time.
    """

    LIVE = "live"
    TURN_BASED = "turn_based"


class Persona(Enum):
    """Tone and voice profile used to judge and narrate a dispute."""

    MEDIATOR = "mediator"
    AUTHORITATIVE = "authoritative"
    COMEDIC = "comedic"


DEFAULT_PERSONA = Persona.MEDIATOR


class DisputeStatus(Enum):
    """Visible lifecycle status of a dispute.

    States:
        OPEN: Accepting turns; adjudication may be requested.
        PROCESSING: Adjudication in flight.
        COMPLETED: Verdict attached.
    """

    OPEN = "open"
    PROCESSING = "processing"
    COMPLETED = "completed"

    def accepts_turns(self) -> bool:
        """Return True if turns may be appended in this status."""
        return self is DisputeStatus.OPEN

    def valid_transitions(self) -> frozenset[DisputeStatus]:
        """Get valid target statuses from this status.

        Returns:
            Frozenset of statuses this status can transition to.
        """
        return STATUS_TRANSITION_MATRIX.get(self, frozenset())


STATUS_TRANSITION_MATRIX: dict[DisputeStatus, frozenset[DisputeStatus]] = {
    DisputeStatus.OPEN: frozenset({DisputeStatus.PROCESSING}),
    # COMPLETED on success, OPEN or COMPLETED again on rollback
    DisputeStatus.PROCESSING: frozenset(
        {DisputeStatus.COMPLETED, DisputeStatus.OPEN}
    ),
    DisputeStatus.COMPLETED: frozenset({DisputeStatus.PROCESSING}),
}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Dispute:
    """A dispute between two named parties.

    Attributes:
        id: Unique identifier.
        owner_id: Identity of the party who created (and exclusively owns) it.
        mode: Capture mode (live or turn based).
        party_a_name: Display name of the first participant (person_a).
        party_b_name: Display name of the second participant (person_b).
        persona: Persona used for judgment and narration.
        status: Current lifecycle status.
        created_at: Creation timestamp (UTC).
        completed_at: When the latest verdict was attached, if any.
        turn_sequence: Last turn order issued for this dispute.
    """

    id: UUID
    owner_id: str
    mode: DisputeMode
    party_a_name: str
    party_b_name: str
    persona: Persona = field(default=DEFAULT_PERSONA)
    status: DisputeStatus = field(default=DisputeStatus.OPEN)
    created_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime | None = field(default=None)
    turn_sequence: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate dispute fields."""
        for label, name in (
            ("party_a_name", self.party_a_name),
            ("party_b_name", self.party_b_name),
        ):
            if not name or not name.strip():
                raise ValueError(f"{label} must not be empty")
            if len(name) > MAX_PARTY_NAME_LENGTH:
                raise ValueError(
                    f"{label} exceeds maximum length of {MAX_PARTY_NAME_LENGTH} characters"
                )
            if name.strip().casefold() == TIE_LABEL.casefold():
                raise ValueError(f"{label} must not be the tie label {TIE_LABEL!r}")
        if self.turn_sequence < 0:
            raise ValueError("turn_sequence must be non-negative")

    def name_for(self, speaker: Speaker) -> str:
        """Resolve the display name of a speaker role.

        Args:
            speaker: The speaker role.

        Returns:
            The participant display name for that role.
        """
        if speaker is Speaker.PERSON_A:
            return self.party_a_name
        return self.party_b_name

    def with_status(
        self,
        new_status: DisputeStatus,
        completed_at: datetime | None = None,
    ) -> Dispute:
        """Create a copy with an updated status.

        Enforces the status transition matrix. Since Dispute is frozen,
        returns a new instance.

        Args:
            new_status: The status to transition to.
            completed_at: Completion stamp to set. When omitted the existing
                stamp is preserved.

        Returns:
            New Dispute with the updated status.

        Raises:
            InvalidDisputeTransitionError: If the transition is not allowed.
        """
        # Import here to avoid circular dependency
        from arbiter.domain.errors.state import InvalidDisputeTransitionError

        if new_status not in self.status.valid_transitions():
            raise InvalidDisputeTransitionError(
                dispute_id=self.id,
                from_status=self.status,
                to_status=new_status,
            )

        return replace(
            self,
            status=new_status,
            completed_at=completed_at if completed_at is not None else self.completed_at,
        )
