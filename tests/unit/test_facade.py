"""Unit tests for the Dashboard facade wired to a scripted client."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from admindash.dashboard import Dashboard

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from admindash.cache import CacheStore
    from admindash.notifications import MemoryNotificationSink
    from tests.conftest import FakeResourceClient


@pytest.fixture()
async def dashboard(
    cache: CacheStore,
    fake_client: FakeResourceClient,
    sink: MemoryNotificationSink,
) -> AsyncIterator[Dashboard]:
    dash = Dashboard(cache=cache, client=fake_client, notifier=sink)  # type: ignore[arg-type]
    yield dash
    await dash.aclose()


class TestClearCache:
    async def test_pending_load_does_not_repopulate_cleared_cache(
        self,
        dashboard: Dashboard,
        fake_client: FakeResourceClient,
        cache: CacheStore,
    ) -> None:
        release = asyncio.Event()

        async def respond() -> Any:
            await release.wait()
            return [{"id": "j1"}]

        fake_client.route("/api/admin/jobs", respond)
        pending = asyncio.create_task(dashboard.load_jobs(force_refresh=True))
        await asyncio.sleep(0.01)

        await dashboard.clear_cache()
        release.set()
        await pending

        assert await cache.get("jobs") is None
        assert "jobs" not in dashboard.collections

    async def test_clearing_one_key_leaves_other_fetches_alone(
        self,
        dashboard: Dashboard,
        fake_client: FakeResourceClient,
        cache: CacheStore,
    ) -> None:
        release = asyncio.Event()

        async def respond() -> Any:
            await release.wait()
            return [{"id": "l1"}]

        fake_client.route("/api/admin/lessons", respond)
        pending = asyncio.create_task(dashboard.load_lessons(force_refresh=True))
        await asyncio.sleep(0.01)

        await dashboard.clear_cache("jobs")
        release.set()
        await pending

        assert await cache.get("lessons") == [{"id": "l1"}]
        assert dashboard.collections["lessons"] == [{"id": "l1"}]
