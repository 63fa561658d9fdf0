"""Unit tests for SupabaseObjectStore with a mocked client."""

from unittest.mock import MagicMock

import pytest

from arbiter.config.settings import StorageConfig
from arbiter.domain.errors.pipeline import MediaPublishFailureError
from arbiter.infrastructure.adapters.storage import supabase_object_store
from arbiter.infrastructure.adapters.storage.supabase_object_store import (
    SupabaseObjectStore,
)


@pytest.fixture
def bucket() -> MagicMock:
    """Storage bucket API."""
    bucket = MagicMock()
    bucket.create_signed_url.return_value = {"signedURL": "https://cdn.example/signed"}
    bucket.create_signed_upload_url.return_value = {"signed_url": "https://cdn.example/up"}
    return bucket


@pytest.fixture
def store(bucket: MagicMock) -> SupabaseObjectStore:
    """Object store over a mocked client."""
    client = MagicMock()
    client.storage.from_.return_value = bucket
    return SupabaseObjectStore(StorageConfig(bucket="audio-test"), client=client)


class TestSupabaseObjectStore:
    """Tests for SupabaseObjectStore."""

    def test_requires_credentials_without_client(self) -> None:
        """Test construction fails when storage is not configured."""
        with pytest.raises(MediaPublishFailureError):
            SupabaseObjectStore(StorageConfig())

    @pytest.mark.asyncio
    async def test_put(self, store: SupabaseObjectStore, bucket: MagicMock) -> None:
        """Test uploads replace existing objects and set headers."""
        await store.put("a/b.mp3", b"data", "audio/mpeg", cache_control="max-age=60")
        bucket.upload.assert_called_once_with(
            "a/b.mp3",
            b"data",
            {"content-type": "audio/mpeg", "upsert": "true", "cache-control": "max-age=60"},
        )

    @pytest.mark.asyncio
    async def test_put_failure(self, store: SupabaseObjectStore, bucket: MagicMock) -> None:
        """Test client errors are wrapped."""
        bucket.upload.side_effect = RuntimeError("bucket not found")
        with pytest.raises(MediaPublishFailureError, match="bucket not found") as exc_info:
            await store.put("k", b"d", "audio/mpeg")
        assert exc_info.value.key == "k"

    @pytest.mark.asyncio
    async def test_put_over_limit(
        self,
        store: SupabaseObjectStore,
        bucket: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test oversized payloads are refused without contacting storage."""
        monkeypatch.setattr(supabase_object_store, "MAX_UPLOAD_BYTES", 4)

        await store.put("small", b"1234", "audio/mpeg")
        with pytest.raises(MediaPublishFailureError, match="upload limit") as exc_info:
            await store.put("big", b"12345", "audio/mpeg")

        assert exc_info.value.key == "big"
        bucket.upload.assert_called_once()

    @pytest.mark.asyncio
    async def test_signed_urls(self, store: SupabaseObjectStore, bucket: MagicMock) -> None:
        """Test both signed URL field spellings are understood."""
        assert await store.signed_url("k", 600) == "https://cdn.example/signed"
        bucket.create_signed_url.assert_called_once_with("k", 600)
        assert await store.signed_upload_url("k", 3600) == "https://cdn.example/up"

    @pytest.mark.asyncio
    async def test_signed_url_missing_field(
        self, store: SupabaseObjectStore, bucket: MagicMock
    ) -> None:
        """Test a response without a URL is a failure."""
        bucket.create_signed_url.return_value = {"error": "not found"}
        with pytest.raises(MediaPublishFailureError, match="no signed URL"):
            await store.signed_url("k", 600)

    @pytest.mark.asyncio
    async def test_remove(self, store: SupabaseObjectStore, bucket: MagicMock) -> None:
        """Test removal skips empty lists."""
        await store.remove([])
        bucket.remove.assert_not_called()
        await store.remove(["a", "b"])
        bucket.remove.assert_called_once_with(["a", "b"])
