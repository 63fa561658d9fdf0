"""Party profile and usage counter models.

The party is the authenticated person who owns disputes. Their profile
embeds the subscription tier and the daily dispute counter consulted by the
usage entitlement gate.

Lazy reset:
    A counter dated on an earlier calendar day is stale. It is treated as
    zero when compared to a limit, but the stored value only changes at the
    next increment. Nothing sweeps counters in the background.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum

from arbiter.domain.models.dispute import DEFAULT_PERSONA, Persona


class SubscriptionTier(Enum):
    """Subscription class controlling usage limits."""

    FREE = "free"
    TRIAL = "trial"
    PREMIUM = "premium"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class UsageCounter:
    """Daily dispute counter embedded in a party profile.

    Attributes:
        disputes_today: Disputes started on last_dispute_date.
        last_dispute_date: UTC calendar date of the last increment.
    """

    disputes_today: int = 0
    last_dispute_date: date | None = None

    def effective_count(self, today: date) -> int:
        """Return the count that applies on ``today``.

        Args:
            today: The current UTC calendar date.

        Returns:
            The stored count if it was recorded today, otherwise 0.
        """
        if self.last_dispute_date != today:
            return 0
        return self.disputes_today

    def incremented(self, today: date) -> UsageCounter:
        """Return the counter after one more dispute started on ``today``."""
        if self.last_dispute_date == today:
            return UsageCounter(self.disputes_today + 1, today)
        return UsageCounter(1, today)


@dataclass(frozen=True, eq=True)
class Party:
    """Profile of an authenticated party.

    Attributes:
        id: Identity-provider subject, trusted as-is.
        email: Verified email address.
        display_name: Optional friendly name.
        tier: Stored subscription tier (may be stale until checked).
        subscription_expires_at: When a paid or trial tier lapses.
        usage: Daily dispute counter.
        preferred_persona: Default persona for new disputes.
        created_at: Profile creation time (UTC).
        updated_at: Last profile change (UTC).
    """

    id: str
    email: str
    display_name: str | None = field(default=None)
    tier: SubscriptionTier = field(default=SubscriptionTier.FREE)
    subscription_expires_at: datetime | None = field(default=None)
    usage: UsageCounter = field(default_factory=UsageCounter)
    preferred_persona: Persona = field(default=DEFAULT_PERSONA)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def subscription_expired(self, now: datetime) -> bool:
        """Check whether a non-free tier has lapsed at ``now``.

        Args:
            now: Current time (timezone-aware).

        Returns:
            True if the tier is paid/trial and its expiry is in the past.
        """
        if self.tier is SubscriptionTier.FREE or self.subscription_expires_at is None:
            return False
        return now > self.subscription_expires_at

    def with_tier(self, tier: SubscriptionTier, updated_at: datetime) -> Party:
        """Return a copy with a new tier."""
        return replace(self, tier=tier, updated_at=updated_at)
