"""Party repository port.

Stores party profiles together with their subscription tier and the
embedded daily dispute counter.

Developer Golden Rules:
1. INCREMENT ATOMICALLY - increment_daily_dispute_count() is a single
   conditional write that returns the new count, never a read-then-write
2. LAZY RESET - the counter is only reset by the increment itself
3. FAIL LOUD - repository raises on errors
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, runtime_checkable

from arbiter.domain.models.dispute import Persona
from arbiter.domain.models.party import Party, SubscriptionTier


@runtime_checkable
class PartyRepositoryProtocol(Protocol):
    """Protocol for party profile persistence.

    Methods:
        get: Retrieve a profile by party id
        upsert: Create a profile or refresh its identity fields
        update_tier: Persist a tier change (e.g. expiry demotion)
        set_preferred_persona: Change the default persona
        increment_daily_dispute_count: Atomic counter increment
    """

    async def get(self, party_id: str) -> Party | None:
        """Retrieve a party profile.

        Args:
            party_id: Identity-provider subject.

        Returns:
            The profile if found, None otherwise.
        """
        ...

    async def upsert(self, party: Party) -> Party:
        """Insert a profile, or update email/display name of an existing one.

        Tier, subscription expiry and usage counter of an existing profile
        are left untouched.

        Args:
            party: Profile carrying the identity fields to store.

        Returns:
            The stored profile.
        """
        ...

    async def update_tier(
        self,
        party_id: str,
        tier: SubscriptionTier,
        updated_at: datetime,
    ) -> None:
        """Persist a new subscription tier.

        Args:
            party_id: The party to update.
            tier: The new tier.
            updated_at: Timestamp of the change.
        """
        ...

    async def set_preferred_persona(
        self,
        party_id: str,
        persona: Persona,
        updated_at: datetime,
    ) -> Party | None:
        """Change the default persona of a party.

        Returns:
            The updated profile, or None if the party does not exist.
        """
        ...

    async def increment_daily_dispute_count(self, party_id: str, today: date) -> int:
        """Record one more dispute started on ``today``.

        Writes 1 dated ``today`` when the stored date differs, otherwise
        adds one to the stored count. Implementations perform this as one
        atomic operation.

        Args:
            party_id: The party whose counter to increment.
            today: Current UTC calendar date.

        Returns:
            The count after the increment.

        Raises:
            PartyNotFoundError: If the party does not exist.
        """
        ...
