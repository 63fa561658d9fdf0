"""Speech adapters (transcription and narration)."""

from arbiter.infrastructure.adapters.speech.elevenlabs_synthesizer import (
    ElevenLabsSynthesizer,
)
from arbiter.infrastructure.adapters.speech.openai_transcriber import (
    OpenAITranscriber,
    file_extension_for,
)

__all__: list[str] = [
    "ElevenLabsSynthesizer",
    "OpenAITranscriber",
    "file_extension_for",
]
