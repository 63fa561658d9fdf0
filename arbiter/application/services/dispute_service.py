"""Dispute creation, retrieval and deletion.

Developer Golden Rules:
1. GATE FIRST - the daily entitlement is checked before anything is written
2. COUNT AFTER SUCCESS - the daily counter is only incremented once the
   dispute has been stored
3. OWNER ONLY - a dispute owned by another party is reported as not found
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from arbiter.application.services.base import LoggingMixin
from arbiter.domain.errors.entitlement import EntitlementDeniedError
from arbiter.domain.errors.not_found import DisputeNotFoundError, PartyNotFoundError
from arbiter.domain.errors.pipeline import MediaPublishFailureError
from arbiter.domain.errors.validation import DisputeValidationError
from arbiter.domain.models.dispute import (
    MAX_PARTY_NAME_LENGTH,
    Dispute,
    DisputeMode,
    Persona,
)
from arbiter.domain.models.verdict import TIE_LABEL

if TYPE_CHECKING:
    from arbiter.application.ports.dispute_repository import DisputeRepositoryProtocol
    from arbiter.application.ports.party_repository import PartyRepositoryProtocol
    from arbiter.application.ports.time_authority import TimeAuthorityProtocol
    from arbiter.application.services.media_publisher import DirectUpload, MediaPublisher
    from arbiter.application.services.usage_entitlement_service import (
        UsageEntitlementService,
    )
    from arbiter.domain.models.turn import Turn
    from arbiter.domain.models.verdict import Verdict

DEFAULT_LIST_LIMIT = 100


def parse_mode(value: str | DisputeMode | None) -> DisputeMode:
    """Map a raw mode value to a DisputeMode.

    Raises:
        DisputeValidationError: If the mode is missing or unknown.
    """
    if isinstance(value, DisputeMode):
        return value
    if not value:
        raise DisputeValidationError("Missing mode", field="mode")
    try:
        return DisputeMode(value)
    except ValueError:
        raise DisputeValidationError(f"Invalid mode: {value}", field="mode") from None


def parse_persona(value: str | Persona) -> Persona:
    """Map a raw persona value to a Persona.

    Raises:
        DisputeValidationError: If the persona is unknown.
    """
    if isinstance(value, Persona):
        return value
    try:
        return Persona(value)
    except ValueError:
        raise DisputeValidationError(f"Invalid persona: {value}", field="persona") from None


def _clean_name(value: str | None, field_name: str) -> str:
    name = (value or "").strip()
    if not name:
        raise DisputeValidationError(f"Missing {field_name}", field=field_name)
    if len(name) > MAX_PARTY_NAME_LENGTH:
        raise DisputeValidationError(
            f"{field_name} exceeds {MAX_PARTY_NAME_LENGTH} characters",
            field=field_name,
        )
    if name.casefold() == TIE_LABEL.casefold():
        raise DisputeValidationError(
            f"{field_name} must not be {TIE_LABEL!r}", field=field_name
        )
    return name


@dataclass(frozen=True)
class CreatedDispute:
    """A newly created dispute.

    Attributes:
        dispute: The stored dispute.
        remaining_today: Disputes the party may still start today
            (None when unlimited).
    """

    dispute: Dispute
    remaining_today: int | None


@dataclass(frozen=True)
class DisputeDetails:
    """A dispute with its turns and verdict.

    Attributes:
        dispute: The dispute.
        turns: Turns in order.
        verdict: Current verdict, if any.
    """

    dispute: Dispute
    turns: tuple[Turn, ...] = field(default_factory=tuple)
    verdict: Verdict | None = None


class DisputeService(LoggingMixin):
    """Creates, reads and deletes a party's disputes."""

    def __init__(
        self,
        dispute_repository: DisputeRepositoryProtocol,
        party_repository: PartyRepositoryProtocol,
        entitlements: UsageEntitlementService,
        time_authority: TimeAuthorityProtocol,
        publisher: MediaPublisher | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            dispute_repository: Dispute storage.
            party_repository: Party profile storage.
            entitlements: Usage gate for the daily dispute limit.
            time_authority: Clock for creation stamps.
            publisher: Media publisher used to clean up audio on delete.
        """
        self._disputes = dispute_repository
        self._parties = party_repository
        self._entitlements = entitlements
        self._time = time_authority
        self._publisher = publisher
        self._init_logger(component="disputes")

    async def create_dispute(
        self,
        party_id: str,
        mode: str | DisputeMode | None,
        party_a_name: str | None,
        party_b_name: str | None,
        persona: str | Persona | None = None,
    ) -> CreatedDispute:
        """Start a new dispute.

        Args:
            party_id: The creating party.
            mode: "live" or "turn_based".
            party_a_name: Display name of person_a.
            party_b_name: Display name of person_b.
            persona: Persona to judge with; defaults to the party's
                preferred persona.

        Returns:
            The created dispute and the remaining daily quota.

        Raises:
            DisputeValidationError: If a field is missing or invalid.
            PartyNotFoundError: If the party has no profile.
            EntitlementDeniedError: If the daily limit has been reached.
        """
        dispute_mode = parse_mode(mode)
        name_a = _clean_name(party_a_name, "party_a_name")
        name_b = _clean_name(party_b_name, "party_b_name")
        chosen_persona = parse_persona(persona) if persona else None

        log = self._log_operation("create_dispute", party_id=party_id)

        party = await self._parties.get(party_id)
        if party is None:
            raise PartyNotFoundError(party_id)

        decision = await self._entitlements.can_start_dispute(party_id)
        if not decision.allowed:
            log.info("dispute_denied", reason=decision.reason)
            raise EntitlementDeniedError(
                party_id=party_id,
                reason_code=decision.reason_code,
                reason=decision.reason or "Daily limit reached",
                remaining=decision.remaining,
            )

        dispute = Dispute(
            id=uuid4(),
            owner_id=party_id,
            mode=dispute_mode,
            party_a_name=name_a,
            party_b_name=name_b,
            persona=chosen_persona or party.preferred_persona,
            created_at=self._time.utcnow(),
        )
        await self._disputes.create(dispute)
        await self._entitlements.record_dispute_started(party_id)

        log.info(
            "dispute_created",
            dispute_id=str(dispute.id),
            mode=dispute.mode.value,
            persona=dispute.persona.value,
            remaining_today=decision.remaining,
        )
        return CreatedDispute(dispute=dispute, remaining_today=decision.remaining)

    async def _owned(self, party_id: str, dispute_id: UUID) -> Dispute:
        dispute = await self._disputes.get(dispute_id)
        if dispute is None or dispute.owner_id != party_id:
            raise DisputeNotFoundError(dispute_id)
        return dispute

    async def _details(self, dispute: Dispute) -> DisputeDetails:
        turns = await self._disputes.list_turns(dispute.id)
        verdict = await self._disputes.get_verdict(dispute.id)
        return DisputeDetails(dispute=dispute, turns=tuple(turns), verdict=verdict)

    async def get_dispute(self, party_id: str, dispute_id: UUID) -> DisputeDetails:
        """Return a dispute with its turns and verdict.

        Raises:
            DisputeNotFoundError: If absent or owned by another party.
        """
        return await self._details(await self._owned(party_id, dispute_id))

    async def list_disputes(
        self,
        party_id: str,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[DisputeDetails]:
        """List a party's disputes with details, newest first."""
        disputes = await self._disputes.list_for_owner(party_id, limit=limit)
        return [await self._details(dispute) for dispute in disputes]

    async def delete_dispute(self, party_id: str, dispute_id: UUID) -> None:
        """Delete a dispute with its turns, verdict and stored audio.

        Audio cleanup is best effort and never fails the delete.

        Raises:
            DisputeNotFoundError: If absent or owned by another party.
        """
        details = await self.get_dispute(party_id, dispute_id)
        keys = [turn.audio_key for turn in details.turns if turn.audio_key]
        if details.verdict is not None and details.verdict.audio_key:
            keys.append(details.verdict.audio_key)

        if not await self._disputes.delete(dispute_id):
            raise DisputeNotFoundError(dispute_id)

        if self._publisher is not None:
            await self._publisher.delete_media(keys)

        self._log_operation(
            "delete_dispute",
            party_id=party_id,
            dispute_id=str(dispute_id),
        ).info("dispute_deleted", media_keys=len(keys))

    async def request_upload_url(
        self,
        party_id: str,
        dispute_id: UUID,
        filename: str,
    ) -> DirectUpload:
        """Issue a direct upload URL for audio of an owned dispute.

        Raises:
            DisputeNotFoundError: If absent or owned by another party.
            DisputeValidationError: If the filename is not a plain file name.
            MediaPublishFailureError: If no object store is configured or
                signing fails.
        """
        dispute = await self._owned(party_id, dispute_id)
        if self._publisher is None:
            raise MediaPublishFailureError("No object store is configured")
        return await self._publisher.direct_upload_url(dispute.owner_id, dispute.id, filename)
