"""Dispute routes: create, list, read, delete, direct upload URLs.

Developer Golden Rules:
1. OWNER ONLY - Services treat disputes of other parties as not found
2. GATE FIRST - Creation is checked against the daily limit before storing
3. FAIL LOUD - Domain errors become RFC 7807 bodies via http_error_for
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from arbiter.api.auth import get_current_identity
from arbiter.api.dependencies.services import get_dispute_service
from arbiter.api.errors import http_error_for
from arbiter.api.models.common import DeleteResponse, ProblemResponse
from arbiter.api.models.dispute import (
    CreateDisputeRequest,
    CreateDisputeResponse,
    DisputeListResponse,
    DisputeResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.dispute_service import (
    DEFAULT_LIST_LIMIT,
    DisputeDetails,
    DisputeService,
)
from arbiter.domain.exceptions import ArbiterError

router = APIRouter(prefix="/v1/disputes", tags=["disputes"])


@router.get("", response_model=DisputeListResponse)
async def list_disputes(
    request: Request,
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=DEFAULT_LIST_LIMIT),
    identity: Identity = Depends(get_current_identity),
    service: DisputeService = Depends(get_dispute_service),
) -> DisputeListResponse:
    """List the caller's disputes, newest first."""
    try:
        disputes = await service.list_disputes(identity.party_id, limit=limit)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return DisputeListResponse(
        disputes=[DisputeResponse.from_details(details) for details in disputes]
    )


@router.post(
    "",
    response_model=CreateDisputeResponse,
    status_code=201,
    responses={
        400: {"model": ProblemResponse, "description": "Missing or invalid field"},
        404: {"model": ProblemResponse, "description": "No party profile"},
        429: {"model": ProblemResponse, "description": "Daily dispute limit reached"},
    },
)
async def create_dispute(
    request_data: CreateDisputeRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeService = Depends(get_dispute_service),
) -> CreateDisputeResponse:
    """Start a dispute.

    Raises:
        HTTPException 400: Missing mode or names, unknown mode or persona
        HTTPException 404: Caller has no profile
        HTTPException 429: Daily limit reached (code LIMIT_EXCEEDED, remaining 0)
    """
    try:
        created = await service.create_dispute(
            party_id=identity.party_id,
            mode=request_data.mode,
            party_a_name=request_data.party_a_name,
            party_b_name=request_data.party_b_name,
            persona=request_data.persona,
        )
    except ArbiterError as e:
        raise http_error_for(e, request) from None

    return CreateDisputeResponse(
        dispute=DisputeResponse.from_details(DisputeDetails(dispute=created.dispute)),
        remaining_today=created.remaining_today,
    )


@router.get(
    "/{dispute_id}",
    response_model=DisputeResponse,
    responses={404: {"model": ProblemResponse, "description": "Dispute not found"}},
)
async def get_dispute(
    dispute_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeService = Depends(get_dispute_service),
) -> DisputeResponse:
    """Return a dispute with its turns and verdict."""
    try:
        details = await service.get_dispute(identity.party_id, dispute_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return DisputeResponse.from_details(details)


@router.delete(
    "/{dispute_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ProblemResponse, "description": "Dispute not found"}},
)
async def delete_dispute(
    dispute_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeService = Depends(get_dispute_service),
) -> DeleteResponse:
    """Delete a dispute, its turns, its verdict and its stored audio."""
    try:
        await service.delete_dispute(identity.party_id, dispute_id)
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return DeleteResponse(success=True)


@router.post(
    "/{dispute_id}/upload-url",
    response_model=UploadUrlResponse,
    responses={
        400: {"model": ProblemResponse, "description": "Filename is not plain"},
        404: {"model": ProblemResponse, "description": "Dispute not found"},
        502: {"model": ProblemResponse, "description": "Storage unavailable"},
    },
)
async def create_upload_url(
    dispute_id: UUID,
    request_data: UploadUrlRequest,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    service: DisputeService = Depends(get_dispute_service),
) -> UploadUrlResponse:
    """Issue a signed URL the client can upload a recording to directly."""
    try:
        upload = await service.request_upload_url(
            identity.party_id, dispute_id, request_data.filename
        )
    except ArbiterError as e:
        raise http_error_for(e, request) from None
    return UploadUrlResponse(
        key=upload.key,
        upload_url=upload.upload_url,
        expires_in=upload.expires_in,
    )
