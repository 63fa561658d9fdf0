"""Identity provider port.

The core trusts the identity returned here as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Identity:
    """A verified caller.

    Attributes:
        party_id: Stable subject identifier.
        email: Verified email address.
    """

    party_id: str
    email: str


@runtime_checkable
class IdentityProviderProtocol(Protocol):
    """Protocol for bearer-token verification."""

    async def verify(self, token: str) -> Identity:
        """Resolve a bearer token to an identity.

        Raises:
            AuthenticationError: If the token is unknown or invalid.
        """
        ...
