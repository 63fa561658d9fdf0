"""In-memory dispute repository for development and testing."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from uuid import UUID, uuid4

from arbiter.application.ports.dispute_repository import (
    DisputeRepositoryProtocol,
    TurnDraft,
)
from arbiter.domain.errors.not_found import DisputeNotFoundError
from arbiter.domain.errors.state import (
    DisputeNotOpenError,
    InvalidDisputeTransitionError,
)
from arbiter.domain.models.dispute import Dispute, DisputeStatus
from arbiter.domain.models.turn import Turn
from arbiter.domain.models.verdict import Verdict


class DisputeRepositoryStub(DisputeRepositoryProtocol):
    """In-memory implementation of DisputeRepositoryProtocol.

    Compare-and-set, turn ordering and verdict completion each run without
    an ``await`` between read and write, giving them the same atomicity as
    the PostgreSQL implementation within one event loop.

    NOT suitable for production use.

    Attributes:
        _disputes: Disputes by id.
        _turns: Turns by dispute id, in order.
        _verdicts: Current verdict by dispute id.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._disputes: dict[UUID, Dispute] = {}
        self._turns: dict[UUID, list[Turn]] = {}
        self._verdicts: dict[UUID, Verdict] = {}

    async def create(self, dispute: Dispute) -> None:
        """Store a new dispute."""
        if dispute.id in self._disputes:
            raise ValueError(f"Dispute already exists: {dispute.id}")
        self._disputes[dispute.id] = dispute
        self._turns[dispute.id] = []

    async def get(self, dispute_id: UUID) -> Dispute | None:
        """Retrieve a dispute by id."""
        return self._disputes.get(dispute_id)

    async def list_for_owner(self, owner_id: str, limit: int = 100) -> list[Dispute]:
        """List a party's disputes, newest first."""
        owned = [d for d in self._disputes.values() if d.owner_id == owner_id]
        owned.sort(key=lambda d: d.created_at, reverse=True)
        return owned[:limit]

    async def delete(self, dispute_id: UUID) -> bool:
        """Delete a dispute with its turns and verdict."""
        if self._disputes.pop(dispute_id, None) is None:
            return False
        self._turns.pop(dispute_id, None)
        self._verdicts.pop(dispute_id, None)
        return True

    async def compare_and_set_status(
        self,
        dispute_id: UUID,
        expected: DisputeStatus,
        new_status: DisputeStatus,
        completed_at: datetime | None = None,
    ) -> bool:
        """Atomically move a dispute from ``expected`` to ``new_status``."""
        dispute = self._disputes.get(dispute_id)
        if dispute is None or dispute.status is not expected:
            return False
        self._disputes[dispute_id] = dispute.with_status(new_status, completed_at)
        return True

    async def append_turn(self, dispute_id: UUID, draft: TurnDraft) -> Turn:
        """Append a turn with the next order from the dispute's sequence."""
        dispute = self._disputes.get(dispute_id)
        if dispute is None:
            raise DisputeNotFoundError(dispute_id)
        if not dispute.status.accepts_turns():
            raise DisputeNotOpenError(dispute_id, dispute.status)

        order = dispute.turn_sequence + 1
        self._disputes[dispute_id] = replace(dispute, turn_sequence=order)
        turn = Turn(
            id=uuid4(),
            dispute_id=dispute_id,
            speaker=draft.speaker,
            text=draft.text,
            order=order,
            audio_key=draft.audio_key,
            audio_url=draft.audio_url,
            duration_seconds=draft.duration_seconds,
            created_at=draft.created_at,
        )
        self._turns.setdefault(dispute_id, []).append(turn)
        return turn

    async def list_turns(self, dispute_id: UUID) -> list[Turn]:
        """Return the turns of a dispute in order."""
        return sorted(self._turns.get(dispute_id, []), key=lambda t: t.order)

    async def count_turns(self, dispute_id: UUID) -> int:
        """Return the number of turns of a dispute."""
        return len(self._turns.get(dispute_id, []))

    async def get_verdict(self, dispute_id: UUID) -> Verdict | None:
        """Return the current verdict of a dispute."""
        return self._verdicts.get(dispute_id)

    async def complete_adjudication(
        self,
        dispute_id: UUID,
        verdict: Verdict,
        completed_at: datetime,
    ) -> Dispute:
        """Replace the verdict and mark the dispute completed."""
        dispute = self._disputes.get(dispute_id)
        if dispute is None:
            raise DisputeNotFoundError(dispute_id)
        if dispute.status is not DisputeStatus.PROCESSING:
            raise InvalidDisputeTransitionError(
                dispute_id=dispute_id,
                from_status=dispute.status,
                to_status=DisputeStatus.COMPLETED,
            )
        completed = dispute.with_status(DisputeStatus.COMPLETED, completed_at)
        self._disputes[dispute_id] = completed
        self._verdicts[dispute_id] = verdict
        return completed

    # Test helpers

    def add_dispute(self, dispute: Dispute) -> None:
        """Store a dispute as-is (test helper)."""
        self._disputes[dispute.id] = dispute
        self._turns.setdefault(dispute.id, [])

    def set_status(self, dispute_id: UUID, status: DisputeStatus) -> None:
        """Force a status without transition checks (test helper)."""
        self._disputes[dispute_id] = replace(self._disputes[dispute_id], status=status)

    def clear(self) -> None:
        """Remove everything (test helper)."""
        self._disputes.clear()
        self._turns.clear()
        self._verdicts.clear()
