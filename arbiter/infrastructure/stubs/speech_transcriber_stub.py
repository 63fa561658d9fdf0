"""Scripted speech-to-text provider for development and testing."""

from __future__ import annotations

from arbiter.application.ports.speech_transcriber import (
    SpeechTranscriberProtocol,
    TranscriptionResult,
)
from arbiter.domain.errors.pipeline import TranscriptionFailureError


class SpeechTranscriberStub(SpeechTranscriberProtocol):
    """Returns a fixed transcription, or raises.

    Attributes:
        calls: (audio, mime_type) of every call, in order.
    """

    def __init__(
        self,
        text: str = "This is a transcribed statement.",
        language: str | None = "en",
        duration_seconds: float | None = None,
        fail: bool = False,
    ) -> None:
        self._result = TranscriptionResult(
            text=text,
            language=language,
            duration_seconds=duration_seconds,
        )
        self._fail = fail
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio: bytes, mime_type: str) -> TranscriptionResult:
        """Record the call and return the scripted transcription."""
        self.calls.append((audio, mime_type))
        if self._fail:
            raise TranscriptionFailureError("transcription unavailable")
        return self._result
