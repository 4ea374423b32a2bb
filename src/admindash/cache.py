"""SQLite collection cache with lazy TTL expiry.

All cache operations catch ``aiosqlite.Error`` internally and degrade
gracefully: read failures return ``None`` (treated as cache miss by callers),
write failures are logged and ignored (fetched collections are still
returned). Infrastructure errors never cross the CacheStore boundary.

Every row key carries a ``<namespace>:<tenant>:`` prefix. A store instance
only ever reads, writes and clears rows under its own prefix, so several
tenants can share one database file without seeing each other's data.
Expiry is checked on read; nothing sweeps expired rows.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from admindash.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()

_CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS resource_cache (
    key        TEXT PRIMARY KEY,
    payload    TEXT NOT NULL,
    stored_at  REAL NOT NULL,
    ttl_ms     INTEGER NOT NULL
)
"""


def _now_ms() -> float:
    return time.time() * 1000


class CacheStore:
    """SQLite-backed collection cache implementing CacheProtocol."""

    def __init__(
        self,
        db: aiosqlite.Connection,
        *,
        namespace: str = "admindash",
        tenant: str = "default",
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self._db = db
        self._prefix = f"{namespace}:{tenant}:"
        self._clock = clock

    @property
    def prefix(self) -> str:
        return self._prefix

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_CACHE_TABLE)
        await self._db.commit()

    async def get(self, key: str) -> list[dict] | None:
        """Return the payload for ``key`` if present and fresh, else ``None``."""
        entry = await self.get_entry(key)
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.payload

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Read an entry regardless of freshness. Returns ``None`` on miss or read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT payload, stored_at, ttl_ms FROM resource_cache WHERE key = ?",
                (self._prefix + key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return CacheEntry(
                key=key,
                payload=json.loads(row[0]),
                stored_at=row[1],
                ttl_ms=row[2],
            )
        except (aiosqlite.Error, ValueError):
            log.warning("cache_read_error", key=key, exc_info=True)
            return None

    async def set(self, key: str, payload: list[dict], ttl_ms: int) -> None:
        """Write an entry stamped with the current time. Non-fatal on failure."""
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO resource_cache (key, payload, stored_at, ttl_ms) "
                "VALUES (?, ?, ?, ?)",
                (self._prefix + key, json.dumps(payload), self._clock(), ttl_ms),
            )
            await self._db.commit()
        except (aiosqlite.Error, TypeError, ValueError):
            log.warning("cache_write_error", key=key, exc_info=True)

    async def clear(self, key: str | None = None) -> None:
        """Remove one entry, or every entry under this store's prefix. Idempotent."""
        try:
            if key is None:
                cursor = await self._db.execute(
                    "DELETE FROM resource_cache WHERE substr(key, 1, ?) = ?",
                    (len(self._prefix), self._prefix),
                )
            else:
                cursor = await self._db.execute(
                    "DELETE FROM resource_cache WHERE key = ?", (self._prefix + key,)
                )
            await self._db.commit()
            log.info("cache_cleared", key=key or "*", deleted=cursor.rowcount)
        except aiosqlite.Error:
            log.warning("cache_clear_error", key=key or "*", exc_info=True)
