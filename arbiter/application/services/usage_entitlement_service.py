"""Usage entitlement gate.

Decides whether a party may start another dispute today or append another
turn to a dispute, based on their subscription tier and the daily counter
embedded in their profile.

Developer Golden Rules:
1. DEMOTE ON READ - an expired trial/premium tier is demoted to free and the
   demotion is persisted during the check itself
2. LAZY RESET - a counter dated on an earlier UTC day counts as zero, but is
   only rewritten by the next increment
3. SOFT LIMIT - the check and the increment are separate calls; two racing
   requests may both pass the check. The increment itself is atomic.
4. NO SIDE EFFECTS ON DENIAL - a denied request changes nothing but the
   (idempotent) tier demotion
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from arbiter.application.services.base import LoggingMixin
from arbiter.domain.errors.not_found import PartyNotFoundError
from arbiter.domain.models.entitlement import (
    EntitlementDecision,
    EntitlementReason,
    UsageSummary,
    policy_for,
)
from arbiter.domain.models.party import Party, SubscriptionTier

if TYPE_CHECKING:
    from arbiter.application.ports.dispute_repository import DisputeRepositoryProtocol
    from arbiter.application.ports.party_repository import PartyRepositoryProtocol
    from arbiter.application.ports.time_authority import TimeAuthorityProtocol


class UsageEntitlementService(LoggingMixin):
    """Tier-based usage gate for dispute creation and turn appends.

    Attributes:
        _parties: Party profile storage.
        _disputes: Dispute storage (for turn counts).
        _time: Time authority; its UTC date defines "today".
    """

    def __init__(
        self,
        party_repository: PartyRepositoryProtocol,
        dispute_repository: DisputeRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the entitlement service.

        Args:
            party_repository: Party profile storage.
            dispute_repository: Dispute storage.
            time_authority: Clock used for expiry and the daily window.
        """
        self._parties = party_repository
        self._disputes = dispute_repository
        self._time = time_authority
        self._init_logger(component="entitlements")

    async def resolve_effective_tier(self, party: Party) -> SubscriptionTier:
        """Resolve the tier that applies right now.

        A lapsed trial or premium subscription is demoted to free and the
        demotion is written back immediately.

        Args:
            party: The stored profile.

        Returns:
            The effective tier.
        """
        now = self._time.utcnow()
        if not party.subscription_expired(now):
            return party.tier

        await self._parties.update_tier(party.id, SubscriptionTier.FREE, now)
        self._log_operation(
            "resolve_effective_tier",
            party_id=party.id,
        ).info(
            "subscription_expired_demoted",
            previous_tier=party.tier.value,
            expired_at=party.subscription_expires_at.isoformat()
            if party.subscription_expires_at
            else None,
        )
        return SubscriptionTier.FREE

    async def _load(self, party_id: str) -> tuple[Party, SubscriptionTier] | None:
        party = await self._parties.get(party_id)
        if party is None:
            return None
        return party, await self.resolve_effective_tier(party)

    async def can_start_dispute(self, party_id: str) -> EntitlementDecision:
        """Check whether a party may start another dispute today.

        Args:
            party_id: The requesting party.

        Returns:
            An allowing decision with the disputes left after this one
            (None when unlimited), or a denying decision with remaining=0.
        """
        log = self._log_operation("can_start_dispute", party_id=party_id)

        loaded = await self._load(party_id)
        if loaded is None:
            log.warning("entitlement_party_not_found")
            return EntitlementDecision.deny(
                EntitlementReason.PARTY_NOT_FOUND, "Party not found"
            )
        party, tier = loaded

        policy = policy_for(tier)
        today = self._time.utcnow().date()
        current = party.usage.effective_count(today)
        limit = policy.daily_dispute_limit

        if limit is None:
            return EntitlementDecision.allow(remaining=None)

        if current >= limit:
            log.info(
                "dispute_limit_reached",
                tier=tier.value,
                disputes_today=current,
                limit=limit,
            )
            return EntitlementDecision.deny(
                EntitlementReason.LIMIT_EXCEEDED,
                f"Daily limit reached ({limit} disputes per day on {tier.value} tier)",
                remaining=0,
            )

        return EntitlementDecision.allow(remaining=limit - current - 1)

    async def can_append_turn(self, party_id: str, dispute_id: UUID) -> EntitlementDecision:
        """Check whether another turn may be appended to a dispute.

        Args:
            party_id: The requesting party.
            dispute_id: The dispute receiving the turn.

        Returns:
            The gate decision. ``remaining`` is the number of turns still
            available after this one, or None when unlimited.
        """
        log = self._log_operation(
            "can_append_turn",
            party_id=party_id,
            dispute_id=str(dispute_id),
        )

        loaded = await self._load(party_id)
        if loaded is None:
            log.warning("entitlement_party_not_found")
            return EntitlementDecision.deny(
                EntitlementReason.PARTY_NOT_FOUND, "Party not found"
            )
        _, tier = loaded

        max_turns = policy_for(tier).max_turns_per_dispute
        if max_turns is None:
            return EntitlementDecision.allow()

        current = await self._disputes.count_turns(dispute_id)
        if current >= max_turns:
            log.info(
                "turn_limit_reached",
                tier=tier.value,
                turns=current,
                limit=max_turns,
            )
            return EntitlementDecision.deny(
                EntitlementReason.TURN_LIMIT_EXCEEDED,
                f"Maximum turns reached ({max_turns} turns per dispute on {tier.value} tier)",
                remaining=0,
            )

        return EntitlementDecision.allow(remaining=max_turns - current - 1)

    async def record_dispute_started(self, party_id: str) -> int:
        """Count one more dispute started today.

        Args:
            party_id: The party who started a dispute.

        Returns:
            The party's dispute count for today after the increment.
        """
        today = self._time.utcnow().date()
        count = await self._parties.increment_daily_dispute_count(party_id, today)
        self._log_operation("record_dispute_started", party_id=party_id).debug(
            "dispute_count_incremented",
            disputes_today=count,
            date=today.isoformat(),
        )
        return count

    async def is_research_enabled(self, party_id: str) -> bool:
        """Return True if the party's effective tier includes fact-checking."""
        loaded = await self._load(party_id)
        if loaded is None:
            return False
        return policy_for(loaded[1]).research_enabled

    async def get_usage_summary(self, party_id: str) -> UsageSummary:
        """Summarize a party's usage for today.

        Raises:
            PartyNotFoundError: If the party has no profile.
        """
        loaded = await self._load(party_id)
        if loaded is None:
            raise PartyNotFoundError(party_id)
        party, tier = loaded

        policy = policy_for(tier)
        current = party.usage.effective_count(self._time.utcnow().date())
        limit = policy.daily_dispute_limit
        return UsageSummary(
            tier=tier,
            disputes_today=current,
            daily_dispute_limit=limit,
            max_turns_per_dispute=policy.max_turns_per_dispute,
            research_enabled=policy.research_enabled,
            remaining_today=None if limit is None else max(0, limit - current),
        )
