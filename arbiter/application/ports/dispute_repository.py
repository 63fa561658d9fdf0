"""Dispute repository port.

Stores disputes, their turns and their verdict. A dispute exclusively owns
its turns and verdict; deleting a dispute cascades to both.

Developer Golden Rules:
1. CAS FOR STATUS - status changes go through compare_and_set_status() so
   two adjudications of one dispute can never both start
2. SEQUENCE FOR ORDER - append_turn() takes the next order from the
   dispute's turn_sequence in the same atomic step as the insert
3. ONE VERDICT - complete_adjudication() replaces any previous verdict and
   marks the dispute completed in one transaction
4. FAIL LOUD - repository raises on errors
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from arbiter.domain.models.dispute import Dispute, DisputeStatus
from arbiter.domain.models.turn import Speaker, Turn
from arbiter.domain.models.verdict import Verdict


@dataclass(frozen=True)
class TurnDraft:
    """A turn that has not yet been given an id and an order.

    Attributes:
        speaker: Which participant spoke.
        text: Finalized statement text.
        created_at: Append timestamp.
        audio_key: Storage key of the recording, if any.
        audio_url: Signed playback URL of the recording, if any.
        duration_seconds: Recording length, if known.
    """

    speaker: Speaker
    text: str
    created_at: datetime
    audio_key: str | None = None
    audio_url: str | None = None
    duration_seconds: int | None = None


@runtime_checkable
class DisputeRepositoryProtocol(Protocol):
    """Protocol for dispute, turn and verdict persistence.

    Methods:
        create: Store a new dispute
        get: Retrieve a dispute
        list_for_owner: List a party's disputes, newest first
        delete: Delete a dispute with its turns and verdict
        compare_and_set_status: Atomic status transition
        append_turn: Append a turn with an atomically assigned order
        list_turns: Turns of a dispute in order
        count_turns: Number of turns of a dispute
        get_verdict: Current verdict of a dispute
        complete_adjudication: Store the verdict and mark the dispute completed
    """

    async def create(self, dispute: Dispute) -> None:
        """Store a new dispute."""
        ...

    async def get(self, dispute_id: UUID) -> Dispute | None:
        """Retrieve a dispute by id.

        Returns:
            The dispute if found, None otherwise.
        """
        ...

    async def list_for_owner(self, owner_id: str, limit: int = 100) -> list[Dispute]:
        """List disputes owned by a party, newest first.

        Args:
            owner_id: The owning party.
            limit: Maximum number of disputes to return.
        """
        ...

    async def delete(self, dispute_id: UUID) -> bool:
        """Delete a dispute together with its turns and verdict.

        Returns:
            True if a dispute was deleted.
        """
        ...

    async def compare_and_set_status(
        self,
        dispute_id: UUID,
        expected: DisputeStatus,
        new_status: DisputeStatus,
        completed_at: datetime | None = None,
    ) -> bool:
        """Move a dispute to ``new_status`` only if it is in ``expected``.

        Implementation Notes:
        - PostgreSQL: UPDATE ... WHERE id = :id AND status = :expected
        - The completion stamp is only overwritten when one is given

        Returns:
            True if the row was updated, False if the status did not match.
        """
        ...

    async def append_turn(self, dispute_id: UUID, draft: TurnDraft) -> Turn:
        """Append a turn, assigning it the next order value.

        The order is taken from the dispute's turn sequence, which is
        incremented in the same atomic step. Order values are never reused,
        even after a failed insert.

        Returns:
            The stored turn.

        Raises:
            DisputeNotFoundError: If the dispute does not exist.
            DisputeNotOpenError: If the dispute no longer accepts turns.
        """
        ...

    async def list_turns(self, dispute_id: UUID) -> list[Turn]:
        """Return the turns of a dispute ordered by ``order``."""
        ...

    async def count_turns(self, dispute_id: UUID) -> int:
        """Return the number of turns of a dispute."""
        ...

    async def get_verdict(self, dispute_id: UUID) -> Verdict | None:
        """Return the current verdict of a dispute, if any."""
        ...

    async def complete_adjudication(
        self,
        dispute_id: UUID,
        verdict: Verdict,
        completed_at: datetime,
    ) -> Dispute:
        """Persist a verdict and move the dispute processing -> completed.

        Any previous verdict of the dispute is replaced. Both writes happen
        in one transaction.

        Returns:
            The completed dispute.

        Raises:
            DisputeNotFoundError: If the dispute does not exist.
            InvalidDisputeTransitionError: If the dispute is not processing.
        """
        ...
