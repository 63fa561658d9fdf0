"""OpenAI text generator using the openai SDK with native async."""

from __future__ import annotations

import asyncio
import time

from openai import AsyncOpenAI
from structlog import get_logger

from arbiter.application.ports.text_generator import (
    CompletionRequest,
    TextGeneratorProtocol,
)
from arbiter.config.settings import GenerationConfig
from arbiter.domain.errors.pipeline import GenerationFailureError

logger = get_logger(__name__)

PROVIDER_NAME = "openai"


class OpenAITextGenerator(TextGeneratorProtocol):
    """Chat completion adapter for verdict generation."""

    def __init__(
        self,
        config: GenerationConfig,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Generation settings (model, timeout, API key).
            client: Pre-built client, mainly for tests.
        """
        if client is None and not config.api_key:
            raise GenerationFailureError("Missing API key: OPENAI_API_KEY", PROVIDER_NAME)
        self._config = config
        self._client = client or AsyncOpenAI(api_key=config.api_key)

    async def complete(self, request: CompletionRequest) -> str:
        """Run one system+user completion and return the reply text."""
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._config.model,
                    messages=[
                        {"role": "system", "content": request.system_instruction},
                        {"role": "user", "content": request.user_content},
                    ],
                    max_tokens=request.max_output_tokens,
                    temperature=request.temperature,
                ),
                timeout=self._config.timeout_seconds,
            )
        except TimeoutError as exc:
            raise GenerationFailureError(
                f"Request timed out after {self._config.timeout_seconds}s",
                PROVIDER_NAME,
            ) from exc
        except Exception as exc:
            raise GenerationFailureError(f"API call failed: {exc}", PROVIDER_NAME) from exc

        choice = response.choices[0] if response.choices else None
        content = choice.message.content if choice and choice.message else None

        logger.info(
            "completion_received",
            model=self._config.model,
            latency_seconds=round(time.monotonic() - start, 3),
            total_tokens=response.usage.total_tokens if response.usage else None,
        )
        return content or ""
