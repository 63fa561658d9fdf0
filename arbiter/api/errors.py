"""Translation of domain errors into RFC 7807 problem responses.

Every route catches ``ArbiterError`` and re-raises the result of
``http_error_for`` with ``from None``, so tracebacks of expected failures
never reach the client.

Status mapping:
    EntitlementDeniedError                          429
    DisputeValidationError                          400
    Dispute/Party/VerdictNotFoundError              404
    DisputeNotOpen/AdjudicationInProgress/
        InvalidDisputeTransitionError               409
    GenerationFailureError                          500
    TranscriptionFailure/MediaPublishFailureError   502
    AuthenticationError                             401
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from arbiter.domain.errors import (
    AdjudicationInProgressError,
    AuthenticationError,
    DisputeNotFoundError,
    DisputeNotOpenError,
    DisputeValidationError,
    EntitlementDeniedError,
    GenerationFailureError,
    InvalidDisputeTransitionError,
    MediaPublishFailureError,
    NarrationFailureError,
    PartyNotFoundError,
    ResearchFailureError,
    TranscriptionFailureError,
    VerdictNotFoundError,
)
from arbiter.domain.exceptions import ArbiterError


def problem(
    request: Request,
    status: int,
    kind: str,
    title: str,
    detail: str,
    headers: dict[str, str] | None = None,
    **extensions: Any,
) -> HTTPException:
    """Build an HTTPException carrying an RFC 7807 body.

    Args:
        request: Current request, used for ``instance``.
        status: HTTP status code.
        kind: Suffix of the ``urn:arbiter:`` problem type.
        title: Short summary.
        detail: Human-readable explanation.
        headers: Extra response headers.
        **extensions: Additional problem members.
    """
    body: dict[str, Any] = {
        "type": f"urn:arbiter:{kind}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": str(request.url),
    }
    body.update(extensions)
    return HTTPException(status_code=status, detail=body, headers=headers)


def http_error_for(exc: ArbiterError, request: Request) -> HTTPException:
    """Map a domain error to its HTTP problem response."""
    if isinstance(exc, EntitlementDeniedError):
        body = exc.to_problem_dict()
        body["instance"] = str(request.url)
        return HTTPException(status_code=429, detail=body)

    if isinstance(exc, DisputeValidationError):
        return problem(
            request, 400, "dispute:invalid", "Invalid Request", exc.message, field=exc.field
        )

    if isinstance(exc, DisputeNotFoundError):
        return problem(
            request,
            404,
            "dispute:not-found",
            "Dispute Not Found",
            str(exc),
            dispute_id=str(exc.dispute_id),
        )
    if isinstance(exc, PartyNotFoundError):
        return problem(
            request,
            404,
            "party:not-found",
            "Party Profile Not Found",
            str(exc),
            party_id=exc.party_id,
        )
    if isinstance(exc, VerdictNotFoundError):
        return problem(
            request,
            404,
            "verdict:not-found",
            "Verdict Not Found",
            str(exc),
            dispute_id=str(exc.dispute_id),
        )

    if isinstance(exc, DisputeNotOpenError):
        return problem(
            request,
            409,
            "dispute:not-open",
            "Dispute Not Open",
            str(exc),
            dispute_id=str(exc.dispute_id),
            current_status=exc.status.value,
        )
    if isinstance(exc, AdjudicationInProgressError):
        return problem(
            request,
            409,
            "dispute:adjudication-in-progress",
            "Adjudication In Progress",
            str(exc),
            dispute_id=str(exc.dispute_id),
        )
    if isinstance(exc, InvalidDisputeTransitionError):
        return problem(
            request,
            409,
            "dispute:invalid-transition",
            "Invalid Status Transition",
            str(exc),
            dispute_id=str(exc.dispute_id),
            from_status=exc.from_status.value,
            to_status=exc.to_status.value,
        )

    if isinstance(exc, GenerationFailureError):
        return problem(
            request,
            500,
            "verdict:generation-failed",
            "Verdict Generation Failed",
            str(exc),
        )
    if isinstance(exc, TranscriptionFailureError):
        return problem(
            request, 502, "audio:transcription-failed", "Transcription Failed", str(exc)
        )
    if isinstance(exc, (MediaPublishFailureError, NarrationFailureError, ResearchFailureError)):
        return problem(request, 502, "provider:failed", "Upstream Provider Failed", str(exc))

    if isinstance(exc, AuthenticationError):
        return problem(
            request,
            401,
            "auth:unauthenticated",
            "Authentication Required",
            str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return problem(request, 500, "internal", "Internal Error", str(exc))
