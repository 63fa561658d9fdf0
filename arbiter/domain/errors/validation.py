"""Validation errors for malformed dispute input.

Raised before any state mutation: missing speaker, empty transcript, unknown
mode or persona, adjudication requested with no turns.

HTTP Status: 400 Bad Request
"""

from __future__ import annotations

from arbiter.domain.exceptions import ArbiterError


class DisputeValidationError(ArbiterError):
    """Raised when a request is malformed.

    Attributes:
        field: Name of the offending field, if one applies.
        message: Description of the problem.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the problem.
            field: Name of the offending field, if one applies.
        """
        self.field = field
        self.message = message
        super().__init__(message)
