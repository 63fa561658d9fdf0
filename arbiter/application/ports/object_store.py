"""Object store port.

Durable binary storage addressed by key, readable through time-boxed signed
URLs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStoreProtocol(Protocol):
    """Protocol for object storage backends.

    All methods raise MediaPublishFailureError on backend failure.
    """

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: str | None = None,
    ) -> None:
        """Upload (or overwrite) an object."""
        ...

    async def signed_url(self, key: str, expires_in: int) -> str:
        """Return a signed download URL valid for ``expires_in`` seconds."""
        ...

    async def signed_upload_url(self, key: str, expires_in: int) -> str:
        """Return a signed URL a client can upload ``key`` to directly."""
        ...

    async def remove(self, keys: list[str]) -> None:
        """Delete objects. Missing keys are ignored."""
        ...
