from __future__ import annotations

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """A cached, already-normalized resource collection."""

    key: str  # Unprefixed key, e.g. "courses"
    payload: list[dict]
    stored_at: float  # Epoch milliseconds
    ttl_ms: int

    def is_fresh(self, now_ms: float) -> bool:
        return now_ms - self.stored_at < self.ttl_ms
