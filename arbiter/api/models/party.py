"""Party profile request/response models."""

from pydantic import BaseModel, Field

from arbiter.api.models.common import DateTimeWithZ
from arbiter.domain.models.entitlement import UsageSummary
from arbiter.domain.models.party import Party


class PartyProfileRequest(BaseModel):
    """Create or refresh the caller's profile."""

    display_name: str | None = Field(default=None, max_length=100)


class PersonaUpdateRequest(BaseModel):
    """Change the persona new disputes default to."""

    persona: str = Field(..., description="mediator, authoritative or comedic")


class PartyResponse(BaseModel):
    """A party profile.

    Attributes:
        id: Identity-provider subject.
        email: Verified email.
        display_name: Friendly name, if set.
        tier: Stored subscription tier.
        subscription_expires_at: When a paid or trial tier lapses.
        preferred_persona: Default persona for new disputes.
        created_at: Profile creation time.
    """

    id: str
    email: str
    display_name: str | None = None
    tier: str
    subscription_expires_at: DateTimeWithZ | None = None
    preferred_persona: str
    created_at: DateTimeWithZ

    @classmethod
    def from_party(cls, party: Party) -> "PartyResponse":
        """Build from a domain party."""
        return cls(
            id=party.id,
            email=party.email,
            display_name=party.display_name,
            tier=party.tier.value,
            subscription_expires_at=party.subscription_expires_at,
            preferred_persona=party.preferred_persona.value,
            created_at=party.created_at,
        )


class UsageResponse(BaseModel):
    """Usage snapshot for the caller. ``None`` limits mean unlimited."""

    tier: str
    disputes_today: int = Field(..., ge=0)
    daily_dispute_limit: int | None = None
    max_turns_per_dispute: int | None = None
    research_enabled: bool
    remaining_today: int | None = None

    @classmethod
    def from_summary(cls, summary: UsageSummary) -> "UsageResponse":
        """Build from a usage summary."""
        return cls(
            tier=summary.tier.value,
            disputes_today=summary.disputes_today,
            daily_dispute_limit=summary.daily_dispute_limit,
            max_turns_per_dispute=summary.max_turns_per_dispute,
            research_enabled=summary.research_enabled,
            remaining_today=summary.remaining_today,
        )
