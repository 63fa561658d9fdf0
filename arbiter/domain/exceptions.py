"""Base exception classes for the arbiter domain layer."""


class ArbiterError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application
    and lets the API layer translate every failure into a structured
    problem response.

    Subclasses carry structured attributes (ids, reason codes, remaining
    quota) in addition to the human-readable message.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
