"""Unit tests for PartyProfileService."""

import pytest

from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.party_profile_service import PartyProfileService
from arbiter.domain.errors.not_found import PartyNotFoundError
from arbiter.domain.errors.validation import DisputeValidationError
from arbiter.domain.models.dispute import Persona
from arbiter.domain.models.party import SubscriptionTier
from arbiter.infrastructure.stubs import PartyRepositoryStub
from tests.helpers import FakeTimeAuthority

IDENTITY = Identity(party_id="party-sam", email="sam@example.com")


@pytest.fixture
def profiles(
    party_repository: PartyRepositoryStub,
    fake_time_authority: FakeTimeAuthority,
) -> PartyProfileService:
    """Profile service over the party stub."""
    return PartyProfileService(party_repository, fake_time_authority)


class TestEnsureProfile:
    """Tests for ensure_profile."""

    @pytest.mark.asyncio
    async def test_creates_free_profile(self, profiles: PartyProfileService) -> None:
        """Test first contact creates a free-tier profile."""
        party = await profiles.ensure_profile(IDENTITY, " Sam ")
        assert party.id == "party-sam"
        assert party.tier is SubscriptionTier.FREE
        assert party.display_name == "Sam"
        assert party.preferred_persona is Persona.MEDIATOR

    @pytest.mark.asyncio
    async def test_keeps_tier_and_name_on_refresh(
        self,
        profiles: PartyProfileService,
        party_repository: PartyRepositoryStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        """Test a repeat call does not reset the tier or clear the name."""
        await profiles.ensure_profile(IDENTITY, "Sam")
        await party_repository.update_tier(
            "party-sam", SubscriptionTier.PREMIUM, fake_time_authority.utcnow()
        )

        party = await profiles.ensure_profile(Identity("party-sam", "new@example.com"))

        assert party.tier is SubscriptionTier.PREMIUM
        assert party.display_name == "Sam"
        assert party.email == "new@example.com"


class TestPersonaAndLookup:
    """Tests for get_profile and set_preferred_persona."""

    @pytest.mark.asyncio
    async def test_missing_profile(self, profiles: PartyProfileService) -> None:
        """Test lookups of unknown parties raise."""
        with pytest.raises(PartyNotFoundError):
            await profiles.get_profile("nobody")
        with pytest.raises(PartyNotFoundError):
            await profiles.set_preferred_persona("nobody", "comedic")

    @pytest.mark.asyncio
    async def test_set_persona(self, profiles: PartyProfileService) -> None:
        """Test the preferred persona is stored."""
        await profiles.ensure_profile(IDENTITY)
        party = await profiles.set_preferred_persona("party-sam", "authoritative")
        assert party.preferred_persona is Persona.AUTHORITATIVE
        assert (await profiles.get_profile("party-sam")).preferred_persona is Persona.AUTHORITATIVE

    @pytest.mark.asyncio
    async def test_unknown_persona(self, profiles: PartyProfileService) -> None:
        """Test an unknown persona is a validation error."""
        await profiles.ensure_profile(IDENTITY)
        with pytest.raises(DisputeValidationError):
            await profiles.set_preferred_persona("party-sam", "pirate")
