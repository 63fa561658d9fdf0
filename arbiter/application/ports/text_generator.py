"""Text generator port.

A single-shot generative-text call: one system instruction and one user
message in, one completion out. No conversation state is kept between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CompletionRequest:
    """Input of a single completion call.

    Attributes:
        system_instruction: Persona-conditioned instruction.
        user_content: The transcript (and optional research context).
        max_output_tokens: Upper bound on the reply length.
        temperature: Sampling temperature.
    """

    system_instruction: str
    user_content: str
    max_output_tokens: int = 2000
    temperature: float = 0.7


@runtime_checkable
class TextGeneratorProtocol(Protocol):
    """Protocol for generative-text providers."""

    async def complete(self, request: CompletionRequest) -> str:
        """Run a completion.

        Args:
            request: The completion request.

        Returns:
            The completion text (may be empty; callers decide what that means).

        Raises:
            GenerationFailureError: If the remote call fails or times out.
        """
        ...
