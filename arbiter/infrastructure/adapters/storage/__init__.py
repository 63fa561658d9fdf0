"""Object storage adapters."""

from arbiter.infrastructure.adapters.storage.supabase_object_store import (
    SupabaseObjectStore,
)

__all__: list[str] = ["SupabaseObjectStore"]
