"""Scripted generative-text provider for development and testing."""

from __future__ import annotations

from arbiter.application.ports.text_generator import (
    CompletionRequest,
    TextGeneratorProtocol,
)
from arbiter.domain.errors.pipeline import GenerationFailureError

DEFAULT_REPLY = (
    "Both of you made reasonable points and listened to each other.\n"
    "VERDICT: TIE"
)


class TextGeneratorStub(TextGeneratorProtocol):
    """Returns a fixed reply, or raises a fixed error.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(
        self,
        reply: str = DEFAULT_REPLY,
        error: Exception | None = None,
    ) -> None:
        """Initialize the stub.

        Args:
            reply: Text returned by complete().
            error: Exception raised by complete() instead, if set.
        """
        self._reply = reply
        self._error = error
        self.requests: list[CompletionRequest] = []

    @classmethod
    def returning(cls, reply: str) -> TextGeneratorStub:
        """Create a stub that always returns ``reply``."""
        return cls(reply=reply)

    @classmethod
    def failing(cls, message: str = "generation unavailable") -> TextGeneratorStub:
        """Create a stub that always raises GenerationFailureError."""
        return cls(error=GenerationFailureError(message, provider="stub"))

    async def complete(self, request: CompletionRequest) -> str:
        """Record the request and return the scripted reply."""
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._reply

    def set_reply(self, reply: str) -> None:
        """Change the scripted reply (test helper)."""
        self._reply = reply
        self._error = None

    def fail_with(self, error: Exception) -> None:
        """Make every later call raise ``error`` (test helper)."""
        self._error = error
