"""In-memory party repository for development and testing."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from arbiter.application.ports.party_repository import PartyRepositoryProtocol
from arbiter.domain.errors.not_found import PartyNotFoundError
from arbiter.domain.models.dispute import Persona
from arbiter.domain.models.party import Party, SubscriptionTier


class PartyRepositoryStub(PartyRepositoryProtocol):
    """In-memory implementation of PartyRepositoryProtocol.

    Every method reads and writes without awaiting in between, so each
    call is atomic with respect to other coroutines on the same loop.

    NOT suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._parties: dict[str, Party] = {}

    async def get(self, party_id: str) -> Party | None:
        """Retrieve a party profile."""
        return self._parties.get(party_id)

    async def upsert(self, party: Party) -> Party:
        """Insert a profile or refresh the identity fields of an existing one."""
        existing = self._parties.get(party.id)
        if existing is None:
            stored = party
        else:
            stored = replace(
                existing,
                email=party.email,
                display_name=party.display_name
                if party.display_name is not None
                else existing.display_name,
                updated_at=party.updated_at,
            )
        self._parties[party.id] = stored
        return stored

    async def update_tier(
        self,
        party_id: str,
        tier: SubscriptionTier,
        updated_at: datetime,
    ) -> None:
        """Persist a new subscription tier."""
        party = self._parties.get(party_id)
        if party is None:
            raise PartyNotFoundError(party_id)
        self._parties[party_id] = party.with_tier(tier, updated_at)

    async def set_preferred_persona(
        self,
        party_id: str,
        persona: Persona,
        updated_at: datetime,
    ) -> Party | None:
        """Change the default persona of a party."""
        party = self._parties.get(party_id)
        if party is None:
            return None
        updated = replace(party, preferred_persona=persona, updated_at=updated_at)
        self._parties[party_id] = updated
        return updated

    async def increment_daily_dispute_count(self, party_id: str, today: date) -> int:
        """Increment the daily counter, resetting it on a new day."""
        party = self._parties.get(party_id)
        if party is None:
            raise PartyNotFoundError(party_id)
        usage = party.usage.incremented(today)
        self._parties[party_id] = replace(party, usage=usage)
        return usage.disputes_today

    # Test helpers

    def add_party(self, party: Party) -> None:
        """Store a profile as-is (test helper)."""
        self._parties[party.id] = party

    def clear(self) -> None:
        """Remove every profile (test helper)."""
        self._parties.clear()
