"""Transcription preview route."""

from fastapi import APIRouter, Depends, Request

from arbiter.api.auth import get_current_identity
from arbiter.api.dependencies.services import get_turn_intake_service
from arbiter.api.errors import http_error_for
from arbiter.api.models.common import ProblemResponse
from arbiter.api.models.transcription import TranscribeRequest, TranscribeResponse
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.turn_intake_service import TurnIntakeService
from arbiter.domain.exceptions import ArbiterError

router = APIRouter(prefix="/v1", tags=["transcription"])


@router.post(
    "/transcribe",
    response_model=TranscribeResponse,
    responses={
        400: {"model": ProblemResponse, "description": "Invalid audio payload"},
        502: {"model": ProblemResponse, "description": "Transcription failed"},
    },
)
async def transcribe(
    request_data: TranscribeRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: TurnIntakeService = Depends(get_turn_intake_service),
) -> TranscribeResponse:
    """Transcribe a recording so the client can review it before submitting."""
    try:
        result = await service.transcribe_preview(
            request_data.audio_base64, request_data.mime_type
        )
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return TranscribeResponse(
        transcription=result.text,
        duration=result.duration_seconds,
        language=result.language,
    )
