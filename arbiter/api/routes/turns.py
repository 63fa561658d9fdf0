"""Turn intake route."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from arbiter.api.auth import get_current_identity
from arbiter.api.dependencies.services import get_turn_intake_service
from arbiter.api.errors import http_error_for
from arbiter.api.models.common import ProblemResponse
from arbiter.api.models.dispute import AppendTurnRequest, TurnResponse
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.turn_intake_service import TurnIntakeService
from arbiter.domain.exceptions import ArbiterError

router = APIRouter(prefix="/v1/disputes", tags=["turns"])


@router.post(
    "/{dispute_id}/turns",
    response_model=TurnResponse,
    status_code=201,
    responses={
        400: {"model": ProblemResponse, "description": "Invalid speaker or content"},
        404: {"model": ProblemResponse, "description": "Dispute not found"},
        409: {"model": ProblemResponse, "description": "Dispute not open"},
        429: {"model": ProblemResponse, "description": "Turn limit reached"},
        502: {"model": ProblemResponse, "description": "Transcription or upload failed"},
    },
)
async def append_turn(
    dispute_id: UUID,
    request_data: AppendTurnRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: TurnIntakeService = Depends(get_turn_intake_service),
) -> TurnResponse:
    """Append a typed or recorded statement to an open dispute.

    Raises:
        HTTPException 400: Missing speaker, no content, bad audio payload
        HTTPException 404: Dispute not found
        HTTPException 409: Dispute is processing or completed
        HTTPException 429: Turn cap reached (code TURN_LIMIT_EXCEEDED)
        HTTPException 502: Transcription or audio upload failed
    """
    try:
        turn = await service.append_turn(
            party_id=identity.party_id,
            dispute_id=dispute_id,
            speaker=request_data.speaker,
            text=request_data.text,
            audio_base64=request_data.audio_base64,
            audio_mime_type=request_data.audio_mime_type,
            duration_seconds=request_data.duration_seconds,
        )
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return TurnResponse.from_turn(turn)
