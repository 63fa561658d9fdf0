"""Static bearer-token identity provider for development and testing."""

from __future__ import annotations

from arbiter.application.ports.identity_provider import (
    Identity,
    IdentityProviderProtocol,
)
from arbiter.domain.errors.auth import AuthenticationError


class StaticTokenIdentityProvider(IdentityProviderProtocol):
    """Resolves bearer tokens from a fixed table.

    NOT suitable for production use.
    """

    def __init__(self, tokens: dict[str, Identity] | None = None) -> None:
        self._tokens = dict(tokens or {})

    @classmethod
    def from_spec(cls, spec: str) -> StaticTokenIdentityProvider:
        """Build from ``token:party_id:email`` entries separated by commas.

        Example:
            >>> StaticTokenIdentityProvider.from_spec("t1:alice:alice@example.com")
        """
        tokens: dict[str, Identity] = {}
        for entry in spec.split(","):
            entry = entry.strip()
            if not entry:
                continue
            parts = entry.split(":", 2)
            if len(parts) != 3 or not all(parts):
                raise ValueError(f"Invalid token entry: {entry!r}")
            token, party_id, email = parts
            tokens[token] = Identity(party_id=party_id, email=email)
        return cls(tokens)

    async def verify(self, token: str) -> Identity:
        """Resolve a token, or raise AuthenticationError."""
        identity = self._tokens.get(token)
        if identity is None:
            raise AuthenticationError("Invalid bearer token")
        return identity

    def register(self, token: str, identity: Identity) -> None:
        """Add a token (test helper)."""
        self._tokens[token] = identity
