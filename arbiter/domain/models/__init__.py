"""Domain models for disputes, turns, verdicts, and party profiles."""

from arbiter.domain.models.dispute import (
    DEFAULT_PERSONA,
    MAX_PARTY_NAME_LENGTH,
    STATUS_TRANSITION_MATRIX,
    Dispute,
    DisputeMode,
    DisputeStatus,
    Persona,
)
from arbiter.domain.models.entitlement import (
    TIER_POLICIES,
    EntitlementDecision,
    EntitlementReason,
    TierPolicy,
    UsageSummary,
    policy_for,
)
from arbiter.domain.models.party import Party, SubscriptionTier, UsageCounter
from arbiter.domain.models.turn import Speaker, Turn
from arbiter.domain.models.verdict import TIE_LABEL, Verdict, Winner

__all__: list[str] = [
    "DEFAULT_PERSONA",
    "Dispute",
    "DisputeMode",
    "DisputeStatus",
    "EntitlementDecision",
    "EntitlementReason",
    "MAX_PARTY_NAME_LENGTH",
    "Party",
    "Persona",
    "STATUS_TRANSITION_MATRIX",
    "Speaker",
    "SubscriptionTier",
    "TIE_LABEL",
    "TIER_POLICIES",
    "TierPolicy",
    "Turn",
    "UsageCounter",
    "UsageSummary",
    "Verdict",
    "Winner",
    "policy_for",
]
