"""Entitlement errors.

Entitlement denials are soft, user-actionable errors. They are raised before
any side effect and never change the status of a dispute.

HTTP Status: 429 Too Many Requests
"""

from __future__ import annotations

from arbiter.domain.exceptions import ArbiterError
from arbiter.domain.models.entitlement import EntitlementReason


class EntitlementDeniedError(ArbiterError):
    """Raised when a party's tier does not allow the requested action.

    Attributes:
        party_id: The party that was denied.
        reason_code: Machine-readable reason (LIMIT_EXCEEDED, ...).
        reason: Human-readable explanation.
        remaining: Remaining-quota hint (0 for a daily limit, None otherwise).
    """

    def __init__(
        self,
        party_id: str,
        reason_code: EntitlementReason,
        reason: str,
        remaining: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            party_id: The party that was denied.
            reason_code: Machine-readable reason.
            reason: Human-readable explanation.
            remaining: Remaining-quota hint.
        """
        self.party_id = party_id
        self.reason_code = reason_code
        self.reason = reason
        self.remaining = remaining
        super().__init__(reason)

    def to_problem_dict(self) -> dict:
        """Serialize to an RFC 7807 problem body.

        Returns:
            Dictionary with type, title, status, detail and quota extensions.
        """
        return {
            "type": "urn:arbiter:entitlement:denied",
            "title": "Usage Limit Reached",
            "status": 429,
            "detail": self.reason,
            "code": self.reason_code.value,
            "remaining": self.remaining,
        }
