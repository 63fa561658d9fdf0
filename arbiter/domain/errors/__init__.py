"""Domain errors for the dispute arbiter.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ArbiterError.
"""

from arbiter.domain.errors.auth import AuthenticationError
from arbiter.domain.errors.entitlement import EntitlementDeniedError
from arbiter.domain.errors.not_found import (
    DisputeNotFoundError,
    PartyNotFoundError,
    VerdictNotFoundError,
)
from arbiter.domain.errors.pipeline import (
    GenerationFailureError,
    MediaPublishFailureError,
    NarrationFailureError,
    ResearchFailureError,
    TranscriptionFailureError,
)
from arbiter.domain.errors.state import (
    AdjudicationInProgressError,
    DisputeNotOpenError,
    InvalidDisputeTransitionError,
)
from arbiter.domain.errors.validation import DisputeValidationError

__all__: list[str] = [
    "AdjudicationInProgressError",
    "AuthenticationError",
    "DisputeNotFoundError",
    "DisputeNotOpenError",
    "DisputeValidationError",
    "EntitlementDeniedError",
    "GenerationFailureError",
    "InvalidDisputeTransitionError",
    "MediaPublishFailureError",
    "NarrationFailureError",
    "PartyNotFoundError",
    "ResearchFailureError",
    "TranscriptionFailureError",
    "VerdictNotFoundError",
]
