"""ElevenLabs text-to-speech adapter.

Streams audio from the ``/v1/text-to-speech/{voice_id}/stream`` endpoint
with httpx. Chunks are yielded as they arrive; buffering is the caller's job.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from structlog import get_logger

from arbiter.application.ports.speech_synthesizer import (
    SpeechRequest,
    SpeechSynthesizerProtocol,
)
from arbiter.config.settings import NarrationConfig
from arbiter.domain.errors.pipeline import NarrationFailureError

logger = get_logger(__name__)


class ElevenLabsSynthesizer(SpeechSynthesizerProtocol):
    """Streaming ElevenLabs client."""

    def __init__(
        self,
        config: NarrationConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Narration settings.
            client: Pre-built HTTP client (tests pass one with a MockTransport).
        """
        if not config.api_key:
            raise NarrationFailureError("Missing API key: ELEVENLABS_API_KEY")
        self._config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def _payload(self, request: SpeechRequest) -> dict[str, object]:
        return {
            "text": request.text,
            "model_id": self._config.model,
            "voice_settings": {
                "stability": self._config.stability,
                "similarity_boost": self._config.similarity_boost,
                "style": request.style,
                "use_speaker_boost": True,
            },
        }

    async def stream(self, request: SpeechRequest) -> AsyncIterator[bytes]:
        """Stream synthesized audio chunks."""
        url = f"{self._config.base_url}/v1/text-to-speech/{request.voice_id}/stream"
        try:
            async with self._client.stream(
                "POST",
                url,
                params={"output_format": self._config.output_format},
                headers={
                    "xi-api-key": self._config.api_key or "",
                    "Accept": "audio/mpeg",
                },
                json=self._payload(request),
            ) as response:
                if response.status_code >= 400:
                    body = await response.aread()
                    raise NarrationFailureError(
                        f"ElevenLabs returned {response.status_code}: "
                        f"{body[:200].decode(errors='replace')}",
                        voice_id=request.voice_id,
                    )
                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk
        except httpx.HTTPError as exc:
            raise NarrationFailureError(
                f"ElevenLabs request failed: {exc}",
                voice_id=request.voice_id,
            ) from exc
        logger.debug("speech_stream_finished", voice_id=request.voice_id)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
