"""Integration tests for the dispute HTTP API.

Drives the FastAPI application end to end over in-memory stubs:
- Profile creation, dispute creation and the daily limit
- Turn intake, adjudication and narrated verdict playback
- RFC 7807 problem bodies for auth, validation and conflicts
"""

from __future__ import annotations

import base64
from collections.abc import Iterator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from arbiter.api.dependencies import (
    get_dispute_lifecycle_service,
    get_dispute_service,
    get_entitlement_service,
    get_identity_provider,
    get_party_profile_service,
    get_turn_intake_service,
)
from arbiter.api.main import app
from arbiter.application.ports.identity_provider import Identity
from arbiter.application.services.dispute_lifecycle_service import (
    DisputeLifecycleService,
)
from arbiter.application.services.dispute_service import DisputeService
from arbiter.application.services.media_publisher import MediaPublisher
from arbiter.application.services.narration_service import NarrationService
from arbiter.application.services.party_profile_service import PartyProfileService
from arbiter.application.services.turn_intake_service import TurnIntakeService
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.application.services.verdict_generator_service import (
    VerdictGeneratorService,
)
from arbiter.infrastructure.stubs import (
    DisputeRepositoryStub,
    ObjectStoreStub,
    PartyRepositoryStub,
    SpeechSynthesizerStub,
    SpeechTranscriberStub,
    StaticTokenIdentityProvider,
    TextGeneratorStub,
)
from tests.helpers import FakeTimeAuthority

pytestmark = pytest.mark.integration

TOKEN = "token-alex"
AUTH = {"Authorization": f"Bearer {TOKEN}"}
VERDICT_REPLY = "Sam kept to the facts while Alex drifted.\nVERDICT: Sam"


@dataclass
class Wiring:
    """Stubs behind the overridden services."""

    disputes: DisputeRepositoryStub
    parties: PartyRepositoryStub
    store: ObjectStoreStub
    generator: TextGeneratorStub
    transcriber: SpeechTranscriberStub


@pytest.fixture
def wiring() -> Iterator[Wiring]:
    """Override every service getter with stub-backed services."""
    clock = FakeTimeAuthority()
    disputes = DisputeRepositoryStub()
    parties = PartyRepositoryStub()
    store = ObjectStoreStub()
    generator = TextGeneratorStub.returning(VERDICT_REPLY)
    transcriber = SpeechTranscriberStub(text="I did the dishes twice this week.")
    publisher = MediaPublisher(store)
    identities = StaticTokenIdentityProvider(
        {TOKEN: Identity(party_id="party-alex", email="alex@example.com")}
    )

    entitlements = UsageEntitlementService(
        party_repository=parties,
        dispute_repository=disputes,
        time_authority=clock,
    )
    profiles = PartyProfileService(party_repository=parties, time_authority=clock)
    dispute_service = DisputeService(
        dispute_repository=disputes,
        party_repository=parties,
        entitlements=entitlements,
        time_authority=clock,
        publisher=publisher,
    )
    intake = TurnIntakeService(
        dispute_repository=disputes,
        entitlements=entitlements,
        time_authority=clock,
        transcriber=transcriber,
        publisher=publisher,
    )
    lifecycle = DisputeLifecycleService(
        dispute_repository=disputes,
        generator=VerdictGeneratorService(generator),
        entitlements=entitlements,
        time_authority=clock,
        narration=NarrationService(SpeechSynthesizerStub()),
        publisher=publisher,
    )

    app.dependency_overrides[get_identity_provider] = lambda: identities
    app.dependency_overrides[get_entitlement_service] = lambda: entitlements
    app.dependency_overrides[get_party_profile_service] = lambda: profiles
    app.dependency_overrides[get_dispute_service] = lambda: dispute_service
    app.dependency_overrides[get_turn_intake_service] = lambda: intake
    app.dependency_overrides[get_dispute_lifecycle_service] = lambda: lifecycle

    yield Wiring(disputes, parties, store, generator, transcriber)

    app.dependency_overrides.clear()


@pytest.fixture
def client(wiring: Wiring) -> TestClient:
    """Client over the overridden application."""
    return TestClient(app)


def create_profile(client: TestClient) -> None:
    response = client.post("/v1/parties/me", json={"display_name": "Alex"}, headers=AUTH)
    assert response.status_code == 200


def create_dispute(client: TestClient) -> dict:
    response = client.post(
        "/v1/disputes",
        json={"mode": "turn_based", "party_a_name": "Alex", "party_b_name": "Sam"},
        headers=AUTH,
    )
    assert response.status_code == 201
    return response.json()


def add_turn(client: TestClient, dispute_id: str, speaker: str, text: str) -> dict:
    response = client.post(
        f"/v1/disputes/{dispute_id}/turns",
        json={"speaker": speaker, "text": text},
        headers=AUTH,
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:
    """Tests for the health endpoint."""

    def test_health_needs_no_token(self, client: TestClient) -> None:
        response = client.get("/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/v1/health", headers={"X-Correlation-ID": "corr-123"})

        assert response.headers["X-Correlation-ID"] == "corr-123"


class TestAuthentication:
    """Tests for bearer token handling."""

    def test_missing_token_is_401(self, client: TestClient) -> None:
        response = client.get("/v1/disputes")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["detail"]["type"] == "urn:arbiter:auth:unauthenticated"

    def test_unknown_token_is_401(self, client: TestClient) -> None:
        response = client.get("/v1/disputes", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


class TestPartyProfile:
    """Tests for /v1/parties/me."""

    def test_profile_is_404_before_creation(self, client: TestClient) -> None:
        response = client.get("/v1/parties/me", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["detail"]["type"] == "urn:arbiter:party:not-found"

    def test_create_profile_defaults_to_free_tier(self, client: TestClient) -> None:
        create_profile(client)

        body = client.get("/v1/parties/me", headers=AUTH).json()
        assert body["id"] == "party-alex"
        assert body["email"] == "alex@example.com"
        assert body["display_name"] == "Alex"
        assert body["tier"] == "free"
        assert body["preferred_persona"] == "mediator"

    def test_update_persona(self, client: TestClient) -> None:
        create_profile(client)

        response = client.patch(
            "/v1/parties/me/persona", json={"persona": "comedic"}, headers=AUTH
        )

        assert response.status_code == 200
        assert response.json()["preferred_persona"] == "comedic"

    def test_unknown_persona_is_400(self, client: TestClient) -> None:
        create_profile(client)

        response = client.patch(
            "/v1/parties/me/persona", json={"persona": "sarcastic"}, headers=AUTH
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "persona"

    def test_usage_reflects_created_disputes(self, client: TestClient) -> None:
        create_profile(client)
        create_dispute(client)

        body = client.get("/v1/parties/me/usage", headers=AUTH).json()

        assert body["tier"] == "free"
        assert body["disputes_today"] == 1
        assert body["daily_dispute_limit"] == 3
        assert body["remaining_today"] == 2
        assert body["research_enabled"] is False


class TestDisputeCreation:
    """Tests for POST /v1/disputes."""

    def test_create_returns_remaining_today(self, client: TestClient) -> None:
        create_profile(client)

        body = create_dispute(client)

        assert body["remaining_today"] == 2
        assert body["dispute"]["status"] == "open"
        assert body["dispute"]["persona"] == "mediator"
        assert body["dispute"]["turns"] == []
        assert body["dispute"]["verdict"] is None

    def test_fourth_dispute_of_the_day_is_429(self, client: TestClient) -> None:
        create_profile(client)
        for _ in range(3):
            create_dispute(client)

        response = client.post(
            "/v1/disputes",
            json={"mode": "live", "party_a_name": "Alex", "party_b_name": "Sam"},
            headers=AUTH,
        )

        assert response.status_code == 429
        detail = response.json()["detail"]
        assert detail["code"] == "LIMIT_EXCEEDED"
        assert detail["remaining"] == 0

    def test_missing_mode_is_400(self, client: TestClient) -> None:
        create_profile(client)

        response = client.post(
            "/v1/disputes",
            json={"party_a_name": "Alex", "party_b_name": "Sam"},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "mode"

    def test_create_without_profile_is_404(self, client: TestClient) -> None:
        response = client.post(
            "/v1/disputes",
            json={"mode": "live", "party_a_name": "Alex", "party_b_name": "Sam"},
            headers=AUTH,
        )

        assert response.status_code == 404

    def test_list_returns_own_disputes(self, client: TestClient) -> None:
        create_profile(client)
        first = create_dispute(client)["dispute"]["id"]
        second = create_dispute(client)["dispute"]["id"]

        body = client.get("/v1/disputes", headers=AUTH).json()

        assert {d["id"] for d in body["disputes"]} == {first, second}

    def test_unknown_dispute_is_404(self, client: TestClient) -> None:
        create_profile(client)

        response = client.get(
            "/v1/disputes/00000000-0000-0000-0000-000000000000", headers=AUTH
        )

        assert response.status_code == 404
        assert response.json()["detail"]["type"] == "urn:arbiter:dispute:not-found"


class TestTurns:
    """Tests for POST /v1/disputes/{id}/turns."""

    def test_typed_turns_are_numbered_in_order(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        first = add_turn(client, dispute_id, "person_a", "You never take out the trash.")
        second = add_turn(client, dispute_id, "person_b", "I took it out on Monday.")

        assert first["order"] == 1
        assert second["order"] == 2
        assert second["speaker"] == "person_b"

    def test_recorded_turn_is_transcribed_and_stored(
        self, client: TestClient, wiring: Wiring
    ) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]
        audio = base64.b64encode(b"fake-webm-bytes").decode()

        response = client.post(
            f"/v1/disputes/{dispute_id}/turns",
            json={
                "speaker": "person_a",
                "audio_base64": f"data:audio/webm;base64,{audio}",
                "audio_mime_type": "audio/webm",
                "duration_seconds": 4,
            },
            headers=AUTH,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["text"] == "I did the dishes twice this week."
        assert body["duration_seconds"] == 4
        assert body["audio_url"].startswith("memory://")
        assert wiring.transcriber.calls[0][0] == b"fake-webm-bytes"
        assert len(wiring.store.objects) == 1

    def test_turn_without_content_is_400(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        response = client.post(
            f"/v1/disputes/{dispute_id}/turns",
            json={"speaker": "person_a"},
            headers=AUTH,
        )

        assert response.status_code == 400

    def test_invalid_speaker_is_400(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        response = client.post(
            f"/v1/disputes/{dispute_id}/turns",
            json={"speaker": "person_c", "text": "Hello"},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "speaker"


class TestAdjudication:
    """Tests for judging a dispute and reading the result."""

    def test_full_flow(self, client: TestClient, wiring: Wiring) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]
        add_turn(client, dispute_id, "person_a", "You never take out the trash.")
        add_turn(client, dispute_id, "person_b", "I took it out on Monday and Thursday.")

        response = client.post(f"/v1/disputes/{dispute_id}/judge", headers=AUTH)

        assert response.status_code == 200
        verdict = response.json()
        assert verdict["dispute_id"] == dispute_id
        assert verdict["winner"] == "person_b"
        assert verdict["winner_name"] == "Sam"
        assert verdict["rationale"] == "Sam kept to the facts while Alex drifted."
        assert verdict["research_performed"] is False
        assert verdict["audio_url"].startswith("memory://")
        assert verdict["audio_duration_seconds"] == 1

        dispute = client.get(f"/v1/disputes/{dispute_id}", headers=AUTH).json()
        assert dispute["status"] == "completed"
        assert dispute["completed_at"].endswith("Z")
        assert len(dispute["turns"]) == 2
        assert dispute["verdict"]["winner_name"] == "Sam"

        audio = client.get(f"/v1/disputes/{dispute_id}/verdict/audio-url", headers=AUTH)
        assert audio.status_code == 200
        assert audio.json()["audio_url"].startswith("memory://")

        deleted = client.delete(f"/v1/disputes/{dispute_id}", headers=AUTH)
        assert deleted.status_code == 200
        assert deleted.json() == {"success": True}
        assert wiring.store.objects == {}
        gone = client.get(f"/v1/disputes/{dispute_id}", headers=AUTH)
        assert gone.status_code == 404

    def test_judging_without_turns_is_400(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        response = client.post(f"/v1/disputes/{dispute_id}/judge", headers=AUTH)

        assert response.status_code == 400
        assert "No turns to judge" in response.json()["detail"]["detail"]

    def test_turn_after_completion_is_409(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]
        add_turn(client, dispute_id, "person_a", "It was my turn to pick the movie.")
        client.post(f"/v1/disputes/{dispute_id}/judge", headers=AUTH)

        response = client.post(
            f"/v1/disputes/{dispute_id}/turns",
            json={"speaker": "person_b", "text": "One more thing."},
            headers=AUTH,
        )

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["type"] == "urn:arbiter:dispute:not-open"
        assert detail["current_status"] == "completed"

    def test_generation_failure_is_500_and_reopens(
        self, client: TestClient, wiring: Wiring
    ) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]
        add_turn(client, dispute_id, "person_a", "I paid for dinner last time.")
        wiring.generator.fail_with(RuntimeError("upstream timeout"))

        response = client.post(f"/v1/disputes/{dispute_id}/judge", headers=AUTH)

        assert response.status_code == 500
        assert response.json()["detail"]["type"] == "urn:arbiter:verdict:generation-failed"
        dispute = client.get(f"/v1/disputes/{dispute_id}", headers=AUTH).json()
        assert dispute["status"] == "open"

    def test_audio_url_without_verdict_is_404(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        response = client.get(f"/v1/disputes/{dispute_id}/verdict/audio-url", headers=AUTH)

        assert response.status_code == 404


class TestMedia:
    """Tests for direct upload URLs and transcription preview."""

    def test_upload_url_is_scoped_to_dispute(self, client: TestClient) -> None:
        create_profile(client)
        dispute_id = create_dispute(client)["dispute"]["id"]

        response = client.post(
            f"/v1/disputes/{dispute_id}/upload-url",
            json={"filename": "closing.webm"},
            headers=AUTH,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["key"] == f"audio/party-alex/{dispute_id}/closing.webm"
        assert body["upload_url"].startswith("memory://")
        assert body["expires_in"] > 0

    def test_transcribe_preview(self, client: TestClient) -> None:
        audio = base64.b64encode(b"preview-bytes").decode()

        response = client.post(
            "/v1/transcribe",
            json={"audio_base64": audio, "mime_type": "audio/webm"},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert response.json()["transcription"] == "I did the dishes twice this week."
        assert response.json()["language"] == "en"

    def test_transcribe_rejects_invalid_base64(self, client: TestClient) -> None:
        response = client.post(
            "/v1/transcribe",
            json={"audio_base64": "!!!not-base64!!!"},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "audio_base64"
