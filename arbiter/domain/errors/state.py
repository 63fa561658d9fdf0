"""Dispute lifecycle errors.

HTTP Status: 409 Conflict
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from arbiter.domain.exceptions import ArbiterError

if TYPE_CHECKING:
    from arbiter.domain.models.dispute import DisputeStatus


class InvalidDisputeTransitionError(ArbiterError):
    """Raised when a status change is not in the transition matrix.

    Attributes:
        dispute_id: The dispute whose status was being changed.
        from_status: Current status.
        to_status: Requested status.
    """

    def __init__(
        self,
        dispute_id: UUID,
        from_status: DisputeStatus,
        to_status: DisputeStatus,
    ) -> None:
        """Initialize the error.

        Args:
            dispute_id: The dispute whose status was being changed.
            from_status: Current status.
            to_status: Requested status.
        """
        self.dispute_id = dispute_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Dispute {dispute_id} cannot move from "
            f"{from_status.value} to {to_status.value}"
        )


class DisputeNotOpenError(ArbiterError):
    """Raised when a turn is appended to a dispute that is not open."""

    def __init__(self, dispute_id: UUID, status: DisputeStatus) -> None:
        """Initialize the error.

        Args:
            dispute_id: The dispute that rejected the turn.
            status: Its current status.
        """
        self.dispute_id = dispute_id
        self.status = status
        super().__init__(
            f"Dispute {dispute_id} is {status.value} and no longer accepts turns"
        )


class AdjudicationInProgressError(ArbiterError):
    """Raised when an adjudication is already in flight for a dispute."""

    def __init__(self, dispute_id: UUID) -> None:
        """Initialize the error.

        Args:
            dispute_id: The dispute being adjudicated.
        """
        self.dispute_id = dispute_id
        super().__init__(f"Dispute {dispute_id} is already being adjudicated")
