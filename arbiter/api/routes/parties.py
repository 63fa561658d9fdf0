"""Party profile routes.

The caller's profile is created with ``POST /v1/parties/me`` after first
sign-in. Disputes can only be created once a profile exists.
"""

from fastapi import APIRouter, Depends, Request

from arbiter.api.auth import get_current_identity
from arbiter.api.dependencies.services import (
    get_entitlement_service,
    get_party_profile_service,
)
from arbiter.api.errors import http_error_for
from arbiter.api.models.common import ProblemResponse
from arbiter.api.models.party import (
    PartyProfileRequest,
    PartyResponse,
    PersonaUpdateRequest,
    UsageResponse,
)
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.party_profile_service import PartyProfileService
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.domain.exceptions import ArbiterError

router = APIRouter(prefix="/v1/parties", tags=["parties"])


@router.get(
    "/me",
    response_model=PartyResponse,
    responses={404: {"model": ProblemResponse, "description": "No profile yet"}},
)
async def get_my_profile(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: PartyProfileService = Depends(get_party_profile_service),
) -> PartyResponse:
    """Return the caller's profile."""
    try:
        party = await service.get_profile(identity.party_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return PartyResponse.from_party(party)


@router.post("/me", response_model=PartyResponse)
async def upsert_my_profile(
    request: Request,
    request_data: PartyProfileRequest | None = None,
    identity: Identity = Depends(get_current_identity),
    service: PartyProfileService = Depends(get_party_profile_service),
) -> PartyResponse:
    """Create the caller's profile, or refresh its email and display name."""
    display_name = request_data.display_name if request_data else None
    try:
        party = await service.ensure_profile(identity, display_name=display_name)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return PartyResponse.from_party(party)


@router.patch(
    "/me/persona",
    response_model=PartyResponse,
    responses={
        400: {"model": ProblemResponse, "description": "Unknown persona"},
        404: {"model": ProblemResponse, "description": "No profile yet"},
    },
)
async def update_my_persona(
    request_data: PersonaUpdateRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: PartyProfileService = Depends(get_party_profile_service),
) -> PartyResponse:
    """Change the persona new disputes default to."""
    try:
        party = await service.set_preferred_persona(identity.party_id, request_data.persona)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return PartyResponse.from_party(party)


@router.get(
    "/me/usage",
    response_model=UsageResponse,
    responses={404: {"model": ProblemResponse, "description": "No profile yet"}},
)
async def get_my_usage(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    entitlements: UsageEntitlementService = Depends(get_entitlement_service),
) -> UsageResponse:
    """Return the caller's effective tier, today's count and limits."""
    try:
        summary = await entitlements.get_usage_summary(identity.party_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return UsageResponse.from_summary(summary)
