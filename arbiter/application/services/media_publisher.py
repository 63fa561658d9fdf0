"""Media publisher for turn recordings and verdict narrations.

Key Layout:
    audio/{owner_id}/{dispute_id}/turn-{sequence}.m4a    turn recording
    audio/{owner_id}/{dispute_id}/judgment.mp3           verdict narration
    audio/{owner_id}/{dispute_id}/{filename}             client direct upload

Lease Policy:
    Playback URLs are signed for 24 hours. Direct client upload URLs are
    signed for 1 hour.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from arbiter.application.services.base import LoggingMixin
from arbiter.domain.errors.pipeline import MediaPublishFailureError
from arbiter.domain.errors.validation import DisputeValidationError

if TYPE_CHECKING:
    from arbiter.application.ports.object_store import ObjectStoreProtocol

PLAYBACK_URL_TTL_SECONDS = 86_400
UPLOAD_URL_TTL_SECONDS = 3_600
CACHE_CONTROL = "max-age=31536000"


class MediaKind(Enum):
    """Kinds of published audio."""

    TURN = "turn"
    JUDGMENT = "judgment"


CONTENT_TYPES: dict[MediaKind, str] = {
    MediaKind.TURN: "audio/mp4",
    MediaKind.JUDGMENT: "audio/mpeg",
}


@dataclass(frozen=True)
class PublishedMedia:
    """A stored audio object.

    Attributes:
        key: Durable storage key.
        url: Time-boxed playback URL.
    """

    key: str
    url: str


@dataclass(frozen=True)
class DirectUpload:
    """A signed URL a client can upload to directly.

    Attributes:
        key: Storage key the upload will land at.
        upload_url: Signed upload URL.
        expires_in: Lease length in seconds.
    """

    key: str
    upload_url: str
    expires_in: int


class MediaPublisher(LoggingMixin):
    """Stores audio objects and issues signed URLs for them."""

    def __init__(
        self,
        object_store: ObjectStoreProtocol,
        playback_ttl_seconds: int = PLAYBACK_URL_TTL_SECONDS,
        upload_ttl_seconds: int = UPLOAD_URL_TTL_SECONDS,
    ) -> None:
        """Initialize the publisher.

        Args:
            object_store: Object storage backend.
            playback_ttl_seconds: Lease of playback URLs.
            upload_ttl_seconds: Lease of direct upload URLs.
        """
        self._store = object_store
        self._playback_ttl = playback_ttl_seconds
        self._upload_ttl = upload_ttl_seconds
        self._init_logger(component="media")

    @property
    def playback_ttl_seconds(self) -> int:
        """Lease of playback URLs in seconds."""
        return self._playback_ttl

    @property
    def upload_ttl_seconds(self) -> int:
        """Lease of direct upload URLs in seconds."""
        return self._upload_ttl

    @staticmethod
    def storage_key(
        owner_id: str,
        dispute_id: UUID,
        kind: MediaKind,
        sequence_hint: int | None = None,
    ) -> str:
        """Derive the storage key of an audio object.

        Turn audio without a sequence hint gets a random suffix.
        """
        if kind is MediaKind.JUDGMENT:
            filename = "judgment.mp3"
        else:
            filename = f"turn-{sequence_hint if sequence_hint else uuid4()}.m4a"
        return f"audio/{owner_id}/{dispute_id}/{filename}"

    async def publish(
        self,
        data: bytes,
        owner_id: str,
        dispute_id: UUID,
        kind: MediaKind,
        sequence_hint: int | None = None,
    ) -> PublishedMedia:
        """Upload audio and sign a playback URL for it.

        Raises:
            MediaPublishFailureError: If the upload or the signing fails.
        """
        key = self.storage_key(owner_id, dispute_id, kind, sequence_hint)
        log = self._log_operation("publish", key=key, kind=kind.value)

        try:
            await self._store.put(
                key,
                data,
                content_type=CONTENT_TYPES[kind],
                cache_control=CACHE_CONTROL,
            )
            url = await self._store.signed_url(key, self._playback_ttl)
        except MediaPublishFailureError:
            raise
        except Exception as exc:
            raise MediaPublishFailureError(f"Publishing {key} failed: {exc}", key=key) from exc

        log.info("media_published", size_bytes=len(data))
        return PublishedMedia(key=key, url=url)

    async def playback_url(self, key: str) -> str:
        """Sign a fresh playback URL for an existing object."""
        try:
            return await self._store.signed_url(key, self._playback_ttl)
        except MediaPublishFailureError:
            raise
        except Exception as exc:
            raise MediaPublishFailureError(f"Signing {key} failed: {exc}", key=key) from exc

    async def direct_upload_url(
        self,
        owner_id: str,
        dispute_id: UUID,
        filename: str,
    ) -> DirectUpload:
        """Issue a signed URL for a client-side upload.

        Raises:
            DisputeValidationError: If the filename is empty or contains a path.
        """
        name = filename.strip()
        if not name or name != posixpath.basename(name) or name in (".", ".."):
            raise DisputeValidationError("filename must be a plain file name", field="filename")

        key = f"audio/{owner_id}/{dispute_id}/{name}"
        upload_url = await self._store.signed_upload_url(key, self._upload_ttl)
        self._log_operation("direct_upload_url", key=key).debug("upload_url_issued")
        return DirectUpload(key=key, upload_url=upload_url, expires_in=self._upload_ttl)

    async def delete_media(self, keys: list[str]) -> int:
        """Delete audio objects, best effort.

        Returns:
            Number of keys submitted for deletion (0 on failure).
        """
        if not keys:
            return 0
        log = self._log_operation("delete_media", keys=len(keys))
        try:
            await self._store.remove(keys)
        except MediaPublishFailureError as exc:
            log.warning("media_delete_failed", error=str(exc))
            return 0
        log.info("media_deleted")
        return len(keys)
