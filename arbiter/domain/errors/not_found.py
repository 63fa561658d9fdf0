"""Not-found errors.

A resource that does not exist and a resource owned by another party are
indistinguishable to the caller.

HTTP Status: 404 Not Found
"""

from __future__ import annotations

from uuid import UUID

from arbiter.domain.exceptions import ArbiterError


class DisputeNotFoundError(ArbiterError):
    """Raised when a dispute is absent or not owned by the caller."""

    def __init__(self, dispute_id: UUID) -> None:
        """Initialize the error.

        Args:
            dispute_id: The dispute that could not be found.
        """
        self.dispute_id = dispute_id
        super().__init__(f"Dispute not found: {dispute_id}")


class PartyNotFoundError(ArbiterError):
    """Raised when no profile exists for an authenticated party."""

    def __init__(self, party_id: str) -> None:
        """Initialize the error.

        Args:
            party_id: The identity without a profile.
        """
        self.party_id = party_id
        super().__init__(f"Party not found: {party_id}")


class VerdictNotFoundError(ArbiterError):
    """Raised when a dispute has no verdict (or no narrated verdict)."""

    def __init__(self, dispute_id: UUID, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            dispute_id: The dispute without a verdict.
            message: Optional override of the default message.
        """
        self.dispute_id = dispute_id
        super().__init__(message or f"No verdict for dispute: {dispute_id}")
