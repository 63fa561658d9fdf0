"""Entitlement policy table and gate decisions.

Tier policy:
    free     3 disputes/day, 10 turns/dispute, no research
    trial   10 disputes/day, 20 turns/dispute, research
    premium unlimited,       unlimited,        research

``None`` stands for unlimited throughout this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arbiter.domain.models.party import SubscriptionTier


class EntitlementReason(Enum):
    """Machine-readable reason codes for denied requests."""

    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    TURN_LIMIT_EXCEEDED = "TURN_LIMIT_EXCEEDED"
    PARTY_NOT_FOUND = "PARTY_NOT_FOUND"


@dataclass(frozen=True)
class TierPolicy:
    """Usage limits for one subscription tier.

    Attributes:
        daily_dispute_limit: Disputes a party may start per UTC day.
        max_turns_per_dispute: Turns a single dispute may hold.
        research_enabled: Whether fact-checking runs during adjudication.
    """

    daily_dispute_limit: int | None
    max_turns_per_dispute: int | None
    research_enabled: bool


TIER_POLICIES: dict[SubscriptionTier, TierPolicy] = {
    SubscriptionTier.FREE: TierPolicy(
        daily_dispute_limit=3,
        max_turns_per_dispute=10,
        research_enabled=False,
    ),
    SubscriptionTier.TRIAL: TierPolicy(
        daily_dispute_limit=10,
        max_turns_per_dispute=20,
        research_enabled=True,
    ),
    SubscriptionTier.PREMIUM: TierPolicy(
        daily_dispute_limit=None,
        max_turns_per_dispute=None,
        research_enabled=True,
    ),
}


def policy_for(tier: SubscriptionTier) -> TierPolicy:
    """Return the policy for a tier."""
    return TIER_POLICIES[tier]


@dataclass(frozen=True)
class EntitlementDecision:
    """Result of an entitlement check.

    Attributes:
        allowed: Whether the request may proceed.
        reason: Human-readable explanation when denied.
        reason_code: Machine-readable reason when denied.
        remaining: Disputes left today after this one (None when unlimited
            or not applicable). Always 0 for a daily-limit denial.
    """

    allowed: bool
    reason: str | None = None
    reason_code: EntitlementReason | None = None
    remaining: int | None = None

    @classmethod
    def allow(cls, remaining: int | None = None) -> EntitlementDecision:
        """Build an allowing decision."""
        return cls(allowed=True, remaining=remaining)

    @classmethod
    def deny(
        cls,
        reason_code: EntitlementReason,
        reason: str,
        remaining: int | None = None,
    ) -> EntitlementDecision:
        """Build a denying decision."""
        return cls(
            allowed=False,
            reason=reason,
            reason_code=reason_code,
            remaining=remaining,
        )


@dataclass(frozen=True)
class UsageSummary:
    """Snapshot of a party's usage for display.

    Attributes:
        tier: Effective tier after expiry resolution.
        disputes_today: Effective count for the current UTC day.
        daily_dispute_limit: Limit for the tier (None = unlimited).
        max_turns_per_dispute: Turn cap for the tier (None = unlimited).
        research_enabled: Whether the tier includes fact-checking.
        remaining_today: Disputes still available today (None = unlimited).
    """

    tier: SubscriptionTier
    disputes_today: int
    daily_dispute_limit: int | None
    max_turns_per_dispute: int | None
    research_enabled: bool
    remaining_today: int | None
