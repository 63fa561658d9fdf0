"""In-memory object store for development and testing."""

from __future__ import annotations

from dataclasses import dataclass

from arbiter.application.ports.object_store import ObjectStoreProtocol
from arbiter.domain.errors.pipeline import MediaPublishFailureError


@dataclass(frozen=True)
class StoredObject:
    """An object held by the stub."""

    data: bytes
    content_type: str
    cache_control: str | None


class ObjectStoreStub(ObjectStoreProtocol):
    """Dictionary-backed object store issuing ``memory://`` URLs.

    Attributes:
        objects: Stored objects by key.
        signed: (key, expires_in) of every signed download URL issued.
    """

    def __init__(self, bucket: str = "dispute-audio", fail_uploads: bool = False) -> None:
        self._bucket = bucket
        self._fail_uploads = fail_uploads
        self.objects: dict[str, StoredObject] = {}
        self.signed: list[tuple[str, int]] = []

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: str | None = None,
    ) -> None:
        """Store an object, or fail if configured to."""
        if self._fail_uploads:
            raise MediaPublishFailureError("upload rejected", key=key)
        self.objects[key] = StoredObject(data, content_type, cache_control)

    async def signed_url(self, key: str, expires_in: int) -> str:
        """Return a fake signed download URL."""
        if key not in self.objects:
            raise MediaPublishFailureError(f"Object not found: {key}", key=key)
        self.signed.append((key, expires_in))
        return f"memory://{self._bucket}/{key}?expires_in={expires_in}"

    async def signed_upload_url(self, key: str, expires_in: int) -> str:
        """Return a fake signed upload URL."""
        return f"memory://{self._bucket}/upload/{key}?expires_in={expires_in}"

    async def remove(self, keys: list[str]) -> None:
        """Delete objects, ignoring missing keys."""
        for key in keys:
            self.objects.pop(key, None)
