"""Speech transcriber port."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TranscriptionResult:
    """Outcome of a speech-to-text call.

    Attributes:
        text: Transcribed text.
        language: Detected language, if reported.
        duration_seconds: Length of the recording, if reported.
    """

    text: str
    language: str | None = None
    duration_seconds: float | None = None


@runtime_checkable
class SpeechTranscriberProtocol(Protocol):
    """Protocol for speech-to-text providers."""

    async def transcribe(self, audio: bytes, mime_type: str) -> TranscriptionResult:
        """Transcribe a recording.

        Args:
            audio: Raw audio bytes.
            mime_type: Mime hint such as "audio/m4a".

        Returns:
            The transcription.

        Raises:
            TranscriptionFailureError: If the provider call fails.
        """
        ...
