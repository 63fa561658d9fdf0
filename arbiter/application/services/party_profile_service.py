"""Party profile management."""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from arbiter.application.services.dispute_service import parse_persona
from arbiter.domain.errors.not_found import PartyNotFoundError
from arbiter.domain.models.party import Party

if TYPE_CHECKING:
    from arbiter.application.ports.identity_provider import Identity
    from arbiter.application.ports.party_repository import PartyRepositoryProtocol
    from arbiter.application.ports.time_authority import TimeAuthorityProtocol
    from arbiter.domain.models.dispute import Persona

logger = get_logger(__name__)


class PartyProfileService:
    """Creates and updates party profiles."""

    def __init__(
        self,
        party_repository: PartyRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._parties = party_repository
        self._time = time_authority

    async def ensure_profile(
        self,
        identity: Identity,
        display_name: str | None = None,
    ) -> Party:
        """Create the caller's profile, or refresh its identity fields.

        Args:
            identity: Verified caller.
            display_name: Optional friendly name.

        Returns:
            The stored profile.
        """
        now = self._time.utcnow()
        party = await self._parties.upsert(
            Party(
                id=identity.party_id,
                email=identity.email,
                display_name=display_name.strip() if display_name else None,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("party_profile_upserted", party_id=party.id, tier=party.tier.value)
        return party

    async def get_profile(self, party_id: str) -> Party:
        """Return a profile.

        Raises:
            PartyNotFoundError: If the party has no profile.
        """
        party = await self._parties.get(party_id)
        if party is None:
            raise PartyNotFoundError(party_id)
        return party

    async def set_preferred_persona(self, party_id: str, persona: str | Persona) -> Party:
        """Change the persona new disputes default to.

        Raises:
            DisputeValidationError: If the persona is unknown.
            PartyNotFoundError: If the party has no profile.
        """
        chosen = parse_persona(persona)
        party = await self._parties.set_preferred_persona(
            party_id, chosen, self._time.utcnow()
        )
        if party is None:
            raise PartyNotFoundError(party_id)
        logger.info("preferred_persona_changed", party_id=party_id, persona=chosen.value)
        return party
