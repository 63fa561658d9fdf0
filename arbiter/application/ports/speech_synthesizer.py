"""Speech synthesizer port.

Text-to-speech providers deliver audio as a stream of byte chunks. Callers
are responsible for buffering; nothing downstream consumes partial audio.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SpeechRequest:
    """Input of a synthesis call.

    Attributes:
        text: Text to speak.
        voice_id: Provider voice identifier.
        style: Style exaggeration between 0.0 and 1.0.
    """

    text: str
    voice_id: str
    style: float = 0.0


@runtime_checkable
class SpeechSynthesizerProtocol(Protocol):
    """Protocol for text-to-speech providers."""

    def stream(self, request: SpeechRequest) -> AsyncIterator[bytes]:
        """Stream synthesized audio.

        Args:
            request: What to say and with which voice.

        Yields:
            Audio byte chunks in playback order.

        Raises:
            NarrationFailureError: If synthesis fails.
        """
        ...
