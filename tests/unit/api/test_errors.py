"""Unit tests for domain error to RFC 7807 translation."""

from uuid import uuid4

import pytest
from starlette.requests import Request

from arbiter.api.errors import http_error_for, problem
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
    TranscriptionFailureError,
    VerdictNotFoundError,
)
from arbiter.domain.exceptions import ArbiterError
from arbiter.domain.models.dispute import DisputeStatus
from arbiter.domain.models.entitlement import EntitlementReason


@pytest.fixture
def request_() -> Request:
    """A bare request for /v1/disputes."""
    return Request(
        {
            "type": "http",
            "method": "POST",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/v1/disputes",
            "query_string": b"",
            "headers": [],
        }
    )


class TestProblem:
    """Tests for the problem() builder."""

    def test_body_carries_standard_members_and_extensions(self, request_: Request) -> None:
        exc = problem(request_, 400, "dispute:invalid", "Invalid", "bad", field="mode")

        assert exc.status_code == 400
        assert exc.detail == {
            "type": "urn:arbiter:dispute:invalid",
            "title": "Invalid",
            "status": 400,
            "detail": "bad",
            "instance": "http://testserver/v1/disputes",
            "field": "mode",
        }


class TestHttpErrorFor:
    """Tests for the status mapping."""

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (DisputeValidationError("Missing mode", field="mode"), 400),
            (DisputeNotFoundError(uuid4()), 404),
            (PartyNotFoundError("party-alex"), 404),
            (VerdictNotFoundError(uuid4()), 404),
            (DisputeNotOpenError(uuid4(), DisputeStatus.COMPLETED), 409),
            (AdjudicationInProgressError(uuid4()), 409),
            (
                InvalidDisputeTransitionError(
                    uuid4(), DisputeStatus.OPEN, DisputeStatus.COMPLETED
                ),
                409,
            ),
            (GenerationFailureError("empty reply"), 500),
            (TranscriptionFailureError("whisper down"), 502),
            (MediaPublishFailureError("upload failed"), 502),
            (NarrationFailureError("tts down"), 502),
            (AuthenticationError("no token"), 401),
            (ArbiterError("unexpected"), 500),
        ],
    )
    def test_status_codes(self, request_: Request, error: ArbiterError, status: int) -> None:
        exc = http_error_for(error, request_)

        assert exc.status_code == status
        assert exc.detail["status"] == status

    def test_entitlement_denial_is_429_with_quota(self, request_: Request) -> None:
        error = EntitlementDeniedError(
            "party-alex",
            EntitlementReason.LIMIT_EXCEEDED,
            "Daily dispute limit of 3 reached",
            remaining=0,
        )

        exc = http_error_for(error, request_)

        assert exc.status_code == 429
        assert exc.detail["type"] == "urn:arbiter:entitlement:denied"
        assert exc.detail["code"] == "LIMIT_EXCEEDED"
        assert exc.detail["remaining"] == 0
        assert exc.detail["instance"] == "http://testserver/v1/disputes"

    def test_not_open_reports_current_status(self, request_: Request) -> None:
        dispute_id = uuid4()

        exc = http_error_for(DisputeNotOpenError(dispute_id, DisputeStatus.PROCESSING), request_)

        assert exc.detail["current_status"] == "processing"
        assert exc.detail["dispute_id"] == str(dispute_id)

    def test_authentication_sets_challenge_header(self, request_: Request) -> None:
        exc = http_error_for(AuthenticationError("no token"), request_)

        assert exc.headers == {"WWW-Authenticate": "Bearer"}
