"""Unit tests for admindash.cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite

from admindash.cache import CacheStore

if TYPE_CHECKING:
    from tests.conftest import FakeClock

COURSES = [{"id": "c1", "title": "Networking"}, {"id": "c2", "title": "Cryptography"}]


class TestGetSet:
    async def test_get_after_set_returns_payload_unchanged(self, cache: CacheStore) -> None:
        await cache.set("courses", COURSES, ttl_ms=60_000)
        assert await cache.get("courses") == COURSES

    async def test_get_missing_returns_none(self, cache: CacheStore) -> None:
        assert await cache.get("nothing-here") is None

    async def test_overwrite_replaces_payload(self, cache: CacheStore) -> None:
        await cache.set("courses", COURSES, ttl_ms=60_000)
        await cache.set("courses", [{"id": "c3"}], ttl_ms=60_000)
        assert await cache.get("courses") == [{"id": "c3"}]

    async def test_empty_collection_is_a_hit(self, cache: CacheStore) -> None:
        await cache.set("jobs", [], ttl_ms=60_000)
        assert await cache.get("jobs") == []

    async def test_entry_records_timestamp_and_ttl(
        self, cache: CacheStore, clock: FakeClock
    ) -> None:
        await cache.set("courses", COURSES, ttl_ms=1234)
        entry = await cache.get_entry("courses")
        assert entry is not None
        assert entry.key == "courses"
        assert entry.stored_at == clock.now_ms
        assert entry.ttl_ms == 1234


class TestExpiry:
    async def test_fresh_just_before_ttl(self, cache: CacheStore, clock: FakeClock) -> None:
        await cache.set("batches", COURSES, ttl_ms=90_000)
        clock.advance(89_999)
        assert await cache.get("batches") == COURSES

    async def test_expired_at_ttl_plus_one_is_miss(
        self, cache: CacheStore, clock: FakeClock
    ) -> None:
        await cache.set("batches", COURSES, ttl_ms=90_000)
        clock.advance(90_001)
        assert await cache.get("batches") is None

    async def test_expired_at_exact_ttl_is_miss(
        self, cache: CacheStore, clock: FakeClock
    ) -> None:
        await cache.set("batches", COURSES, ttl_ms=90_000)
        clock.advance(90_000)
        assert await cache.get("batches") is None

    async def test_get_entry_still_returns_expired_entry(
        self, cache: CacheStore, clock: FakeClock
    ) -> None:
        await cache.set("batches", COURSES, ttl_ms=1000)
        clock.advance(5000)
        entry = await cache.get_entry("batches")
        assert entry is not None
        assert entry.payload == COURSES
        assert entry.is_fresh(clock()) is False


class TestClear:
    async def test_clear_single_key(self, cache: CacheStore) -> None:
        await cache.set("courses", COURSES, ttl_ms=60_000)
        await cache.set("teachers", [{"id": "t1"}], ttl_ms=60_000)
        await cache.clear("courses")
        assert await cache.get("courses") is None
        assert await cache.get("teachers") == [{"id": "t1"}]

    async def test_clear_all(self, cache: CacheStore) -> None:
        await cache.set("courses", COURSES, ttl_ms=60_000)
        await cache.set("teachers", [{"id": "t1"}], ttl_ms=60_000)
        await cache.clear()
        assert await cache.get("courses") is None
        assert await cache.get("teachers") is None

    async def test_clear_all_twice_is_idempotent(self, cache: CacheStore) -> None:
        await cache.set("courses", COURSES, ttl_ms=60_000)
        await cache.clear()
        await cache.clear()
        assert await cache.get_entry("courses") is None

    async def test_clear_missing_key_is_noop(self, cache: CacheStore) -> None:
        await cache.clear("never-set")
        await cache.clear("never-set")
        assert await cache.get("never-set") is None

    async def test_clear_all_leaves_foreign_rows(
        self, cache: CacheStore, db: aiosqlite.Connection
    ) -> None:
        await db.execute(
            "INSERT INTO resource_cache (key, payload, stored_at, ttl_ms) VALUES (?, ?, ?, ?)",
            ("otherapp:settings", "[]", 0, 1),
        )
        await db.commit()
        await cache.set("courses", COURSES, ttl_ms=60_000)
        await cache.clear()
        cursor = await db.execute("SELECT key FROM resource_cache")
        assert [row[0] for row in await cursor.fetchall()] == ["otherapp:settings"]


class TestTenantIsolation:
    async def test_tenants_sharing_a_database_do_not_see_each_other(
        self, cache: CacheStore, db: aiosqlite.Connection, clock: FakeClock
    ) -> None:
        other = CacheStore(db, namespace="admindash", tenant="globex", clock=clock)
        await cache.set("users", [{"id": "u1", "name": "Acme student"}], ttl_ms=60_000)
        assert await other.get("users") is None
        assert await other.get_entry("users") is None

    async def test_clear_all_only_touches_own_tenant(
        self, cache: CacheStore, db: aiosqlite.Connection, clock: FakeClock
    ) -> None:
        other = CacheStore(db, namespace="admindash", tenant="globex", clock=clock)
        await cache.set("users", [{"id": "u1"}], ttl_ms=60_000)
        await other.set("users", [{"id": "g1"}], ttl_ms=60_000)
        await other.clear()
        assert await cache.get("users") == [{"id": "u1"}]
        assert await other.get("users") is None


class TestFailures:
    async def test_read_failure_returns_none(self, cache: CacheStore) -> None:
        """Simulate a database read error; should return None, not raise."""
        original_execute = cache._db.execute

        async def failing_execute(*args, **kwargs):
            raise aiosqlite.OperationalError("disk I/O error")

        cache._db.execute = failing_execute  # type: ignore[assignment]
        assert await cache.get("courses") is None
        cache._db.execute = original_execute  # type: ignore[assignment]

    async def test_write_failure_does_not_raise(self, cache: CacheStore) -> None:
        original_execute = cache._db.execute

        async def failing_execute(*args, **kwargs):
            raise aiosqlite.OperationalError("disk I/O error")

        cache._db.execute = failing_execute  # type: ignore[assignment]
        await cache.set("courses", COURSES, ttl_ms=60_000)
        cache._db.execute = original_execute  # type: ignore[assignment]
        assert await cache.get("courses") is None

    async def test_clear_failure_does_not_raise(self, cache: CacheStore) -> None:
        original_execute = cache._db.execute

        async def failing_execute(*args, **kwargs):
            raise aiosqlite.OperationalError("disk I/O error")

        cache._db.execute = failing_execute  # type: ignore[assignment]
        await cache.clear()
        cache._db.execute = original_execute  # type: ignore[assignment]


class TestDurability:
    async def test_entries_survive_reconnect(self, tmp_path, clock: FakeClock) -> None:
        db_path = str(tmp_path / "cache.db")
        async with aiosqlite.connect(db_path) as conn:
            store = CacheStore(conn, tenant="acme", clock=clock)
            await store.init_db()
            await store.set("courses", COURSES, ttl_ms=60_000)

        async with aiosqlite.connect(db_path) as conn:
            store = CacheStore(conn, tenant="acme", clock=clock)
            await store.init_db()
            assert await store.get("courses") == COURSES
