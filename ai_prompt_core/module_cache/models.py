"""Persisted cache records."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ModuleCacheEntry(BaseModel):
    """One published source.

    Entries are never refreshed in place: an entry is served as-is until it
    is explicitly cleared.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    source_ref: str
    kind: str
    local_path: Path
    fetched_at: datetime
    size_bytes: int


class CacheStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_count: int
    total_size_bytes: int


__all__ = ["CacheStats", "ModuleCacheEntry"]
