"""Unit tests for TurnIntakeService."""

import asyncio
import base64
from uuid import uuid4

import pytest

from arbiter.application.services.media_publisher import MediaPublisher
from arbiter.application.services.turn_intake_service import (
    TurnIntakeService,
    decode_audio_payload,
    parse_speaker,
)
from arbiter.application.services.usage_entitlement_service import (
    UsageEntitlementService,
)
from arbiter.domain.errors.entitlement import EntitlementDeniedError
from arbiter.domain.errors.not_found import DisputeNotFoundError
from arbiter.domain.errors.pipeline import TranscriptionFailureError
from arbiter.domain.errors.state import DisputeNotOpenError
from arbiter.domain.errors.validation import DisputeValidationError
from arbiter.domain.models.dispute import Dispute, DisputeStatus
from arbiter.domain.models.entitlement import EntitlementReason
from arbiter.domain.models.turn import Speaker
from arbiter.infrastructure.stubs import (
    DisputeRepositoryStub,
    ObjectStoreStub,
    SpeechTranscriberStub,
)
from tests.helpers import FakeTimeAuthority

AUDIO = b"\x00\x01fake-m4a"
AUDIO_B64 = base64.b64encode(AUDIO).decode()


@pytest.fixture
def transcriber() -> SpeechTranscriberStub:
    """Transcriber reporting a 2.6 second recording."""
    return SpeechTranscriberStub(text="  I paid last time.  ", duration_seconds=2.6)


@pytest.fixture
def intake(
    dispute_repository: DisputeRepositoryStub,
    entitlements: UsageEntitlementService,
    fake_time_authority: FakeTimeAuthority,
    transcriber: SpeechTranscriberStub,
    publisher: MediaPublisher,
) -> TurnIntakeService:
    """Turn intake with every collaborator wired."""
    return TurnIntakeService(
        dispute_repository=dispute_repository,
        entitlements=entitlements,
        time_authority=fake_time_authority,
        transcriber=transcriber,
        publisher=publisher,
    )


class TestPayloadHelpers:
    """Tests for decode_audio_payload and parse_speaker."""

    def test_decodes_plain_base64(self) -> None:
        """Test a bare base64 payload."""
        assert decode_audio_payload(AUDIO_B64) == AUDIO

    def test_strips_data_url_prefix(self) -> None:
        """Test a data URL payload."""
        assert decode_audio_payload(f"data:audio/x-m4a;base64,{AUDIO_B64}") == AUDIO

    @pytest.mark.parametrize("payload", ["not base64!!", "", "data:audio/m4a;base64,"])
    def test_rejects_bad_payloads(self, payload: str) -> None:
        """Test invalid or empty audio."""
        with pytest.raises(DisputeValidationError) as exc_info:
            decode_audio_payload(payload)
        assert exc_info.value.field == "audio_base64"

    def test_parse_speaker(self) -> None:
        """Test known and unknown speaker values."""
        assert parse_speaker("person_b") is Speaker.PERSON_B
        with pytest.raises(DisputeValidationError, match="Missing speaker"):
            parse_speaker(None)
        with pytest.raises(DisputeValidationError, match="Invalid speaker"):
            parse_speaker("person_c")


class TestAppendTextTurn:
    """Tests for typed turns."""

    @pytest.mark.asyncio
    async def test_orders_are_sequential(
        self, intake: TurnIntakeService, open_dispute: Dispute
    ) -> None:
        """Test orders run 1..n without gaps."""
        orders = []
        for index in range(4):
            speaker = "person_a" if index % 2 == 0 else "person_b"
            turn = await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, speaker, text=f" statement {index} "
            )
            orders.append(turn.order)
        assert orders == [1, 2, 3, 4]
        assert turn.text == "statement 3"

    @pytest.mark.asyncio
    async def test_concurrent_appends_never_collide(
        self,
        intake: TurnIntakeService,
        dispute_repository: DisputeRepositoryStub,
        open_dispute: Dispute,
    ) -> None:
        """Test concurrent appends get distinct orders."""
        turns = await asyncio.gather(
            *(
                intake.append_turn(open_dispute.owner_id, open_dispute.id, "person_a", text=f"t{i}")
                for i in range(5)
            )
        )
        assert sorted(turn.order for turn in turns) == [1, 2, 3, 4, 5]
        stored = await dispute_repository.list_turns(open_dispute.id)
        assert [turn.order for turn in stored] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_uses_injected_clock(
        self,
        intake: TurnIntakeService,
        fake_time_authority: FakeTimeAuthority,
        open_dispute: Dispute,
    ) -> None:
        """Test created_at comes from the time authority."""
        turn = await intake.append_turn(
            open_dispute.owner_id, open_dispute.id, "person_a", text="hello there"
        )
        assert turn.created_at == fake_time_authority.utcnow()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_missing_content(
        self, intake: TurnIntakeService, open_dispute: Dispute, text: str | None
    ) -> None:
        """Test a turn needs text or audio."""
        with pytest.raises(DisputeValidationError, match="Missing transcription or audio"):
            await intake.append_turn(open_dispute.owner_id, open_dispute.id, "person_a", text=text)

    @pytest.mark.asyncio
    async def test_missing_speaker(self, intake: TurnIntakeService, open_dispute: Dispute) -> None:
        """Test a turn needs a speaker."""
        with pytest.raises(DisputeValidationError):
            await intake.append_turn(open_dispute.owner_id, open_dispute.id, None, text="hi")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [DisputeStatus.PROCESSING, DisputeStatus.COMPLETED])
    async def test_not_open(
        self,
        intake: TurnIntakeService,
        dispute_repository: DisputeRepositoryStub,
        open_dispute: Dispute,
        status: DisputeStatus,
    ) -> None:
        """Test turns are rejected unless the dispute is open."""
        dispute_repository.set_status(open_dispute.id, status)
        with pytest.raises(DisputeNotOpenError):
            await intake.append_turn(open_dispute.owner_id, open_dispute.id, "person_a", text="hi")
        assert await dispute_repository.count_turns(open_dispute.id) == 0

    @pytest.mark.asyncio
    async def test_other_owner_sees_not_found(
        self, intake: TurnIntakeService, open_dispute: Dispute
    ) -> None:
        """Test a foreign dispute is indistinguishable from a missing one."""
        with pytest.raises(DisputeNotFoundError):
            await intake.append_turn("party-mallory", open_dispute.id, "person_a", text="hi")
        with pytest.raises(DisputeNotFoundError):
            await intake.append_turn(open_dispute.owner_id, uuid4(), "person_a", text="hi")

    @pytest.mark.asyncio
    async def test_turn_cap(self, intake: TurnIntakeService, open_dispute: Dispute) -> None:
        """Test the free tier stops at ten turns."""
        for index in range(10):
            await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, "person_a", text=f"turn {index}"
            )
        with pytest.raises(EntitlementDeniedError) as exc_info:
            await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, "person_b", text="one more"
            )
        assert exc_info.value.reason_code is EntitlementReason.TURN_LIMIT_EXCEEDED


class TestAppendAudioTurn:
    """Tests for recorded turns."""

    @pytest.mark.asyncio
    async def test_transcribes_and_publishes(
        self,
        intake: TurnIntakeService,
        transcriber: SpeechTranscriberStub,
        object_store: ObjectStoreStub,
        open_dispute: Dispute,
    ) -> None:
        """Test the transcription becomes the text and the audio is stored."""
        turn = await intake.append_turn(
            open_dispute.owner_id,
            open_dispute.id,
            "person_b",
            text="ignored",
            audio_base64=AUDIO_B64,
            audio_mime_type="audio/mp4",
        )

        assert turn.text == "I paid last time."
        assert turn.duration_seconds == 3
        assert turn.audio_key == f"audio/{open_dispute.owner_id}/{open_dispute.id}/turn-1.m4a"
        assert turn.audio_url is not None
        assert object_store.objects[turn.audio_key].data == AUDIO
        assert transcriber.calls == [(AUDIO, "audio/mp4")]

    @pytest.mark.asyncio
    async def test_client_duration_wins(
        self, intake: TurnIntakeService, open_dispute: Dispute
    ) -> None:
        """Test a client-reported duration is kept."""
        turn = await intake.append_turn(
            open_dispute.owner_id,
            open_dispute.id,
            "person_a",
            audio_base64=AUDIO_B64,
            duration_seconds=7,
        )
        assert turn.duration_seconds == 7

    @pytest.mark.asyncio
    async def test_transcription_failure_appends_nothing(
        self,
        dispute_repository: DisputeRepositoryStub,
        entitlements: UsageEntitlementService,
        fake_time_authority: FakeTimeAuthority,
        object_store: ObjectStoreStub,
        publisher: MediaPublisher,
        open_dispute: Dispute,
    ) -> None:
        """Test a failed transcription rejects the turn."""
        intake = TurnIntakeService(
            dispute_repository,
            entitlements,
            fake_time_authority,
            transcriber=SpeechTranscriberStub(fail=True),
            publisher=publisher,
        )
        with pytest.raises(TranscriptionFailureError):
            await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, "person_a", audio_base64=AUDIO_B64
            )
        assert await dispute_repository.count_turns(open_dispute.id) == 0
        assert object_store.objects == {}

    @pytest.mark.asyncio
    async def test_empty_transcription_rejected(
        self,
        dispute_repository: DisputeRepositoryStub,
        entitlements: UsageEntitlementService,
        fake_time_authority: FakeTimeAuthority,
        open_dispute: Dispute,
    ) -> None:
        """Test silence is not a turn."""
        intake = TurnIntakeService(
            dispute_repository,
            entitlements,
            fake_time_authority,
            transcriber=SpeechTranscriberStub(text="   "),
        )
        with pytest.raises(DisputeValidationError, match="Transcription is empty"):
            await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, "person_a", audio_base64=AUDIO_B64
            )

    @pytest.mark.asyncio
    async def test_no_transcriber_configured(
        self,
        dispute_repository: DisputeRepositoryStub,
        entitlements: UsageEntitlementService,
        fake_time_authority: FakeTimeAuthority,
        open_dispute: Dispute,
    ) -> None:
        """Test audio turns fail without a speech-to-text provider."""
        intake = TurnIntakeService(dispute_repository, entitlements, fake_time_authority)
        with pytest.raises(TranscriptionFailureError, match="No speech-to-text provider"):
            await intake.append_turn(
                open_dispute.owner_id, open_dispute.id, "person_a", audio_base64=AUDIO_B64
            )


class TestTranscribePreview:
    """Tests for transcribe_preview."""

    @pytest.mark.asyncio
    async def test_preview_stores_nothing(
        self,
        intake: TurnIntakeService,
        object_store: ObjectStoreStub,
    ) -> None:
        """Test previews only transcribe."""
        result = await intake.transcribe_preview(AUDIO_B64, "audio/webm")
        assert result.text == "  I paid last time.  "
        assert result.duration_seconds == 2.6
        assert object_store.objects == {}
