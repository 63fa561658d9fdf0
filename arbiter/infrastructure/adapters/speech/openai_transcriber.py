"""OpenAI speech-to-text adapter."""

from __future__ import annotations

import asyncio

from openai import AsyncOpenAI
from structlog import get_logger

from arbiter.application.ports.speech_transcriber import (
    SpeechTranscriberProtocol,
    TranscriptionResult,
)
from arbiter.config.settings import TranscriptionConfig
from arbiter.domain.errors.pipeline import TranscriptionFailureError

logger = get_logger(__name__)

# Mime subtype -> file extension understood by the transcription endpoint
_EXTENSIONS: dict[str, str] = {
    "mpeg": "mp3",
    "mp3": "mp3",
    "mp4": "m4a",
    "m4a": "m4a",
    "x-m4a": "m4a",
    "wav": "wav",
    "webm": "webm",
}
DEFAULT_EXTENSION = "m4a"


def file_extension_for(mime_type: str) -> str:
    """Map an audio mime type to a file extension, defaulting to m4a."""
    subtype = mime_type.split(";", 1)[0].strip().lower().rpartition("/")[2]
    return _EXTENSIONS.get(subtype, DEFAULT_EXTENSION)


class OpenAITranscriber(SpeechTranscriberProtocol):
    """Whisper transcription adapter."""

    def __init__(
        self,
        config: TranscriptionConfig,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if client is None and not config.api_key:
            raise TranscriptionFailureError("Missing API key: OPENAI_API_KEY")
        self._config = config
        self._client = client or AsyncOpenAI(api_key=config.api_key)

    async def transcribe(self, audio: bytes, mime_type: str) -> TranscriptionResult:
        """Transcribe a recording with verbose output (language and duration)."""
        filename = f"audio.{file_extension_for(mime_type)}"
        try:
            response = await asyncio.wait_for(
                self._client.audio.transcriptions.create(
                    model=self._config.model,
                    file=(filename, audio, mime_type),
                    response_format="verbose_json",
                ),
                timeout=self._config.timeout_seconds,
            )
        except TimeoutError as exc:
            raise TranscriptionFailureError(
                f"Transcription timed out after {self._config.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise TranscriptionFailureError(f"Transcription failed: {exc}") from exc

        text = (getattr(response, "text", None) or "").strip()
        logger.info(
            "audio_transcribed",
            bytes=len(audio),
            filename=filename,
            characters=len(text),
        )
        return TranscriptionResult(
            text=text,
            language=getattr(response, "language", None),
            duration_seconds=getattr(response, "duration", None),
        )
