"""Narration of verdicts with a persona-specific voice.

The synthesizer streams audio; this service buffers the whole stream before
returning, so callers never see partial audio. Duration is estimated from
the byte length at a fixed bitrate rather than decoded from the audio.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from structlog import get_logger

from arbiter.application.ports.speech_synthesizer import SpeechRequest
from arbiter.domain.errors.pipeline import NarrationFailureError
from arbiter.domain.models.dispute import DEFAULT_PERSONA, Persona

if TYPE_CHECKING:
    from arbiter.application.ports.speech_synthesizer import SpeechSynthesizerProtocol

logger = get_logger(__name__)

PERSONA_VOICES: dict[Persona, str] = {
    Persona.MEDIATOR: "EXAVITQu4vr4xnSDxMaL",
    Persona.AUTHORITATIVE: "ErXwobaYiN019PkySvjV",
    Persona.COMEDIC: "MF3mGyEYCl7XYWbV9V6O",
}
DEFAULT_VOICE = PERSONA_VOICES[DEFAULT_PERSONA]

PERSONA_STYLES: dict[Persona, float] = {Persona.COMEDIC: 0.5}

# 128 kbps mp3
DEFAULT_BYTES_PER_SECOND = 16_000


@dataclass(frozen=True)
class SynthesizedSpeech:
    """Fully buffered narration.

    Attributes:
        audio: Encoded audio bytes.
        estimated_duration_seconds: Length estimated from the byte count.
        voice_id: Voice that spoke it.
    """

    audio: bytes
    estimated_duration_seconds: int
    voice_id: str


class NarrationService:
    """Turns verdict text into buffered speech."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizerProtocol,
        voices: Mapping[Persona, str] | None = None,
        default_voice: str = DEFAULT_VOICE,
        bytes_per_second: int = DEFAULT_BYTES_PER_SECOND,
    ) -> None:
        """Initialize the service.

        Args:
            synthesizer: Text-to-speech provider.
            voices: Persona to voice id map (defaults to PERSONA_VOICES).
            default_voice: Voice used for personas missing from the map.
            bytes_per_second: Bitrate assumed for duration estimates.
        """
        if bytes_per_second <= 0:
            raise ValueError("bytes_per_second must be positive")
        self._synthesizer = synthesizer
        self._voices = dict(voices) if voices is not None else dict(PERSONA_VOICES)
        self._default_voice = default_voice
        self._bytes_per_second = bytes_per_second

    def voice_for_persona(self, persona: Persona) -> str:
        """Return the voice id of a persona, or the default voice."""
        return self._voices.get(persona, self._default_voice)

    def estimate_duration_seconds(self, byte_length: int) -> int:
        """Estimate playback length from the encoded size, rounded half up."""
        return int(byte_length / self._bytes_per_second + 0.5)

    async def synthesize_speech(self, text: str, persona: Persona) -> SynthesizedSpeech:
        """Synthesize and buffer speech for ``text``.

        Args:
            text: Text to speak.
            persona: Persona selecting voice and style.

        Returns:
            The buffered audio and its estimated duration.

        Raises:
            NarrationFailureError: If synthesis fails or yields no audio.
        """
        voice_id = self.voice_for_persona(persona)
        request = SpeechRequest(
            text=text,
            voice_id=voice_id,
            style=PERSONA_STYLES.get(persona, 0.0),
        )
        log = logger.bind(persona=persona.value, voice_id=voice_id)

        chunks: list[bytes] = []
        try:
            async for chunk in self._synthesizer.stream(request):
                chunks.append(chunk)
        except NarrationFailureError:
            raise
        except Exception as exc:
            raise NarrationFailureError(
                f"Speech synthesis failed: {exc}", voice_id=voice_id
            ) from exc

        audio = b"".join(chunks)
        if not audio:
            raise NarrationFailureError("Speech synthesis returned no audio", voice_id=voice_id)

        duration = self.estimate_duration_seconds(len(audio))
        log.info("speech_synthesized", audio_bytes=len(audio), duration_seconds=duration)
        return SynthesizedSpeech(
            audio=audio,
            estimated_duration_seconds=duration,
            voice_id=voice_id,
        )
