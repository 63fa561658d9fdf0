"""Unit tests for the party profile, usage counter and tier policies."""

from datetime import date, datetime, timedelta, timezone

from arbiter.domain.models.entitlement import (
    EntitlementDecision,
    EntitlementReason,
    policy_for,
)
from arbiter.domain.models.party import SubscriptionTier, UsageCounter
from tests.helpers.factories import make_party

TODAY = date(2026, 3, 10)


class TestUsageCounter:
    """Tests for the lazily reset daily counter."""

    def test_count_applies_on_same_day(self) -> None:
        """Test a counter dated today is used as-is."""
        assert UsageCounter(2, TODAY).effective_count(TODAY) == 2

    def test_stale_count_is_zero(self) -> None:
        """Test a counter from yesterday counts as zero."""
        assert UsageCounter(3, TODAY - timedelta(days=1)).effective_count(TODAY) == 0

    def test_increment_same_day(self) -> None:
        """Test incrementing on the same day adds one."""
        assert UsageCounter(2, TODAY).incremented(TODAY) == UsageCounter(3, TODAY)

    def test_increment_resets_on_new_day(self) -> None:
        """Test the first increment of a new day starts at one."""
        stale = UsageCounter(3, TODAY - timedelta(days=1))
        assert stale.incremented(TODAY) == UsageCounter(1, TODAY)

    def test_never_used_counter(self) -> None:
        """Test a fresh counter."""
        assert UsageCounter().effective_count(TODAY) == 0
        assert UsageCounter().incremented(TODAY) == UsageCounter(1, TODAY)


class TestSubscriptionExpiry:
    """Tests for Party.subscription_expired."""

    now = datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc)

    def test_free_never_expires(self) -> None:
        """Test free tier with an old expiry is not expired."""
        party = make_party(expires_at=self.now - timedelta(days=30))
        assert not party.subscription_expired(self.now)

    def test_premium_past_expiry(self) -> None:
        """Test an elapsed premium subscription."""
        party = make_party(
            tier=SubscriptionTier.PREMIUM, expires_at=self.now - timedelta(seconds=1)
        )
        assert party.subscription_expired(self.now)

    def test_trial_without_expiry(self) -> None:
        """Test a trial with no expiry date never lapses."""
        party = make_party(tier=SubscriptionTier.TRIAL)
        assert not party.subscription_expired(self.now)


class TestTierPolicies:
    """Tests for the tier policy table."""

    def test_free_policy(self) -> None:
        """Test free tier limits."""
        policy = policy_for(SubscriptionTier.FREE)
        assert policy.daily_dispute_limit == 3
        assert policy.max_turns_per_dispute == 10
        assert policy.research_enabled is False

    def test_trial_policy(self) -> None:
        """Test trial tier limits."""
        policy = policy_for(SubscriptionTier.TRIAL)
        assert policy.daily_dispute_limit == 10
        assert policy.max_turns_per_dispute == 20
        assert policy.research_enabled is True

    def test_premium_is_unlimited(self) -> None:
        """Test premium tier has no limits."""
        policy = policy_for(SubscriptionTier.PREMIUM)
        assert policy.daily_dispute_limit is None
        assert policy.max_turns_per_dispute is None
        assert policy.research_enabled is True

    def test_decision_builders(self) -> None:
        """Test allow/deny factories."""
        assert EntitlementDecision.allow(2) == EntitlementDecision(allowed=True, remaining=2)
        denied = EntitlementDecision.deny(EntitlementReason.LIMIT_EXCEEDED, "nope", remaining=0)
        assert not denied.allowed
        assert denied.reason_code is EntitlementReason.LIMIT_EXCEEDED
        assert denied.remaining == 0
