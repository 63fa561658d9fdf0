"""Adjudication routes.

``POST /judge`` runs the pipeline synchronously: optional fact checking,
verdict generation, optional narration. A generation failure returns 500
with the dispute restored to its previous status; a narration failure still
returns the verdict, without audio.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from arbiter.api.auth import get_current_identity
from arbiter.api.dependencies.services import get_dispute_lifecycle_service
from arbiter.api.errors import http_error_for
from arbiter.api.models.common import ProblemResponse
from arbiter.api.models.dispute import AdjudicationResponse, AudioUrlResponse
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.dispute_lifecycle_service import (
    DisputeLifecycleService,
)
from arbiter.domain.exceptions import ArbiterError

router = APIRouter(prefix="/v1/disputes", tags=["adjudication"])


@router.post(
    "/{dispute_id}/judge",
    response_model=AdjudicationResponse,
    responses={
        400: {"model": ProblemResponse, "description": "No turns to judge"},
        404: {"model": ProblemResponse, "description": "Dispute not found"},
        409: {"model": ProblemResponse, "description": "Adjudication in progress"},
        500: {"model": ProblemResponse, "description": "Verdict generation failed"},
    },
)
async def judge_dispute(
    dispute_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeLifecycleService = Depends(get_dispute_lifecycle_service),
) -> AdjudicationResponse:
    """Adjudicate a dispute and return the verdict."""
    try:
        outcome = await service.adjudicate(identity.party_id, dispute_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return AdjudicationResponse.from_outcome(outcome)


@router.get(
    "/{dispute_id}/verdict/audio-url",
    response_model=AudioUrlResponse,
    responses={
        404: {"model": ProblemResponse, "description": "No narrated verdict"},
        502: {"model": ProblemResponse, "description": "Signing failed"},
    },
)
async def get_verdict_audio_url(
    dispute_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeLifecycleService = Depends(get_dispute_lifecycle_service),
) -> AudioUrlResponse:
    """Sign a fresh playback URL for the narrated verdict."""
    try:
        url = await service.refresh_verdict_audio_url(identity.party_id, dispute_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return AudioUrlResponse(audio_url=url)
