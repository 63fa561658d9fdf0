"""Generative-text adapters."""

from arbiter.infrastructure.adapters.llm.openai_text_generator import (
    OpenAITextGenerator,
)

__all__: list[str] = ["OpenAITextGenerator"]
