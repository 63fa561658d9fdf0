"""Remote pipeline step errors.

Generation failures are fatal to an adjudication attempt and are raised
only after the dispute status has been rolled back. Narration and publish
failures are caught inside the adjudication pipeline and only suppress the
audio fields of the verdict. Transcription failures reject a turn.
"""

from __future__ import annotations

from arbiter.domain.exceptions import ArbiterError


class GenerationFailureError(ArbiterError):
    """Raised when the verdict call fails or returns empty content.

    HTTP Status: 500 Internal Server Error
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            provider: Name of the generative-text provider, if known.
        """
        self.provider = provider
        prefix = f"[{provider}] " if provider else ""
        super().__init__(f"{prefix}{message}")


class NarrationFailureError(ArbiterError):
    """Raised when text-to-speech synthesis fails."""

    def __init__(self, message: str, voice_id: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            voice_id: Voice that was requested.
        """
        self.voice_id = voice_id
        super().__init__(message)


class MediaPublishFailureError(ArbiterError):
    """Raised when uploading or signing an audio object fails."""

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the failure.
            key: Storage key involved.
        """
        self.key = key
        super().__init__(message)


class TranscriptionFailureError(ArbiterError):
    """Raised when speech-to-text fails for a submitted recording.

    HTTP Status: 502 Bad Gateway
    """


class ResearchFailureError(ArbiterError):
    """Raised when a web research lookup fails."""
