"""Scripted text-to-speech provider for development and testing."""

from __future__ import annotations

from collections.abc import AsyncIterator

from arbiter.application.ports.speech_synthesizer import (
    SpeechRequest,
    SpeechSynthesizerProtocol,
)

# One second of audio at 128 kbps, in four chunks
DEFAULT_CHUNKS: tuple[bytes, ...] = (b"\x00" * 4000,) * 4


class SpeechSynthesizerStub(SpeechSynthesizerProtocol):
    """Streams fixed chunks, or raises a fixed error.

    The error is raised after the first chunk when ``fail_mid_stream`` is
    set, exercising the buffering path.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(
        self,
        chunks: tuple[bytes, ...] = DEFAULT_CHUNKS,
        error: Exception | None = None,
        fail_mid_stream: bool = False,
    ) -> None:
        self._chunks = chunks
        self._error = error
        self._fail_mid_stream = fail_mid_stream
        self.requests: list[SpeechRequest] = []

    @classmethod
    def failing(
        cls,
        error: Exception | None = None,
        fail_mid_stream: bool = False,
    ) -> SpeechSynthesizerStub:
        """Create a stub that always raises."""
        return cls(
            error=error or RuntimeError("synthesizer unavailable"),
            fail_mid_stream=fail_mid_stream,
        )

    async def stream(self, request: SpeechRequest) -> AsyncIterator[bytes]:
        """Yield the scripted chunks."""
        self.requests.append(request)
        if self._error is not None and not self._fail_mid_stream:
            raise self._error
        for index, chunk in enumerate(self._chunks):
            if self._error is not None and index == 1:
                raise self._error
            yield chunk
