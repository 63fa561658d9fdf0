"""Turn intake: validation, optional transcription, and ordered append.

A turn arrives either as typed text or as a base64 recording. Recordings are
transcribed and published before the turn is stored; the stored turn then
carries the transcription as its text and the recording's storage key.

Ordering:
    Appends to one dispute are serialized in-process by a per-dispute lock,
    and the store assigns ``order`` from an atomically incremented
    per-dispute sequence, so concurrent appends can neither collide nor
    reuse an order value.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import re
import weakref
from typing import TYPE_CHECKING
from uuid import UUID

from arbiter.application.ports.dispute_repository import TurnDraft
from arbiter.application.services.base import LoggingMixin
from arbiter.application.services.media_publisher import MediaKind
from arbiter.domain.errors.entitlement import EntitlementDeniedError
from arbiter.domain.errors.not_found import DisputeNotFoundError
from arbiter.domain.errors.pipeline import TranscriptionFailureError
from arbiter.domain.errors.state import DisputeNotOpenError
from arbiter.domain.errors.validation import DisputeValidationError
from arbiter.domain.models.turn import Speaker, Turn

if TYPE_CHECKING:
    from arbiter.application.ports.dispute_repository import DisputeRepositoryProtocol
    from arbiter.application.ports.speech_transcriber import (
        SpeechTranscriberProtocol,
        TranscriptionResult,
    )
    from arbiter.application.ports.time_authority import TimeAuthorityProtocol
    from arbiter.application.services.media_publisher import MediaPublisher
    from arbiter.application.services.usage_entitlement_service import (
        UsageEntitlementService,
    )
    from arbiter.domain.models.dispute import Dispute

DATA_URL_PREFIX = re.compile(r"^data:audio/[\w.+-]+;base64,")
DEFAULT_AUDIO_MIME_TYPE = "audio/m4a"


def decode_audio_payload(payload: str) -> bytes:
    """Decode a base64 recording, with or without a ``data:audio/...`` prefix.

    Raises:
        DisputeValidationError: If the payload is empty or not valid base64.
    """
    data = "".join(DATA_URL_PREFIX.sub("", payload.strip(), count=1).split())
    try:
        audio = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DisputeValidationError("audio is not valid base64", field="audio_base64") from exc
    if not audio:
        raise DisputeValidationError("audio is empty", field="audio_base64")
    return audio


def parse_speaker(value: str | None) -> Speaker:
    """Map a raw speaker value to a role.

    Raises:
        DisputeValidationError: If the speaker is missing or unknown.
    """
    if not value:
        raise DisputeValidationError("Missing speaker", field="speaker")
    try:
        return Speaker(value)
    except ValueError:
        raise DisputeValidationError(f"Invalid speaker: {value}", field="speaker") from None


class TurnIntakeService(LoggingMixin):
    """Appends turns to open disputes."""

    def __init__(
        self,
        dispute_repository: DisputeRepositoryProtocol,
        entitlements: UsageEntitlementService,
        time_authority: TimeAuthorityProtocol,
        transcriber: SpeechTranscriberProtocol | None = None,
        publisher: MediaPublisher | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            dispute_repository: Dispute and turn storage.
            entitlements: Usage gate for the turn cap.
            time_authority: Clock for turn timestamps.
            transcriber: Speech-to-text provider; audio turns are rejected
                without one.
            publisher: Media publisher for turn recordings; recordings are
                not stored without one.
        """
        self._disputes = dispute_repository
        self._entitlements = entitlements
        self._time = time_authority
        self._transcriber = transcriber
        self._publisher = publisher
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._init_logger(component="turns")

    def _lock_for(self, dispute_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(dispute_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[dispute_id] = lock
        return lock

    async def _owned_dispute(self, party_id: str, dispute_id: UUID) -> Dispute:
        dispute = await self._disputes.get(dispute_id)
        if dispute is None or dispute.owner_id != party_id:
            raise DisputeNotFoundError(dispute_id)
        return dispute

    async def _transcribe(self, audio: bytes, mime_type: str) -> TranscriptionResult:
        if self._transcriber is None:
            raise TranscriptionFailureError("No speech-to-text provider is configured")
        return await self._transcriber.transcribe(audio, mime_type)

    async def append_turn(
        self,
        party_id: str,
        dispute_id: UUID,
        speaker: str | None,
        text: str | None = None,
        audio_base64: str | None = None,
        audio_mime_type: str | None = None,
        duration_seconds: int | None = None,
    ) -> Turn:
        """Append a turn to an open dispute.

        Args:
            party_id: The requesting party (must own the dispute).
            dispute_id: Target dispute.
            speaker: "person_a" or "person_b".
            text: Typed statement. Ignored when audio is given.
            audio_base64: Base64 recording (data URL prefix allowed).
            audio_mime_type: Mime type of the recording.
            duration_seconds: Recording length reported by the client.

        Returns:
            The stored turn.

        Raises:
            DisputeValidationError: Missing/invalid speaker, no content,
                bad audio payload, or an empty transcription.
            DisputeNotFoundError: Dispute absent or owned by someone else.
            DisputeNotOpenError: Dispute no longer accepts turns.
            EntitlementDeniedError: Turn cap reached for the party's tier.
            TranscriptionFailureError: Speech-to-text failed.
            MediaPublishFailureError: Storing the recording failed.
        """
        # Step 1: Validate before any side effect
        role = parse_speaker(speaker)
        audio = decode_audio_payload(audio_base64) if audio_base64 else None
        if audio is None and not (text and text.strip()):
            raise DisputeValidationError("Missing transcription or audio", field="text")
        if duration_seconds is not None and duration_seconds < 0:
            raise DisputeValidationError(
                "duration_seconds must be non-negative", field="duration_seconds"
            )

        log = self._log_operation(
            "append_turn",
            party_id=party_id,
            dispute_id=str(dispute_id),
            speaker=role.value,
            has_audio=audio is not None,
        )

        async with self._lock_for(dispute_id):
            # Step 2: Ownership and status
            dispute = await self._owned_dispute(party_id, dispute_id)
            if not dispute.status.accepts_turns():
                raise DisputeNotOpenError(dispute_id, dispute.status)

            # Step 3: Turn cap
            decision = await self._entitlements.can_append_turn(party_id, dispute_id)
            if not decision.allowed:
                log.info("turn_denied", reason=decision.reason)
                raise EntitlementDeniedError(
                    party_id=party_id,
                    reason_code=decision.reason_code,
                    reason=decision.reason or "Turn limit reached",
                    remaining=decision.remaining,
                )

            # Step 4: Transcribe and publish the recording
            audio_key: str | None = None
            audio_url: str | None = None
            if audio is not None:
                result = await self._transcribe(audio, audio_mime_type or DEFAULT_AUDIO_MIME_TYPE)
                text = result.text
                if duration_seconds is None and result.duration_seconds is not None:
                    duration_seconds = int(result.duration_seconds + 0.5)
                if self._publisher is not None:
                    published = await self._publisher.publish(
                        audio,
                        owner_id=dispute.owner_id,
                        dispute_id=dispute_id,
                        kind=MediaKind.TURN,
                        sequence_hint=dispute.turn_sequence + 1,
                    )
                    audio_key, audio_url = published.key, published.url

            if not text or not text.strip():
                raise DisputeValidationError("Transcription is empty", field="text")

            # Step 5: Append with a store-assigned order
            turn = await self._disputes.append_turn(
                dispute_id,
                TurnDraft(
                    speaker=role,
                    text=text.strip(),
                    created_at=self._time.utcnow(),
                    audio_key=audio_key,
                    audio_url=audio_url,
                    duration_seconds=duration_seconds,
                ),
            )

        log.info("turn_appended", order=turn.order, turn_id=str(turn.id))
        return turn

    async def transcribe_preview(
        self,
        audio_base64: str,
        mime_type: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe a recording without storing anything.

        Raises:
            DisputeValidationError: If the payload is not valid base64 audio.
            TranscriptionFailureError: If speech-to-text fails.
        """
        audio = decode_audio_payload(audio_base64)
        result = await self._transcribe(audio, mime_type or DEFAULT_AUDIO_MIME_TYPE)
        self._log_operation("transcribe_preview").debug(
            "preview_transcribed", chars=len(result.text)
        )
        return result
