"""Integration test fixtures.

Provides a fully wired Dashboard with in-memory SQLite, a real
ResourceClient over httpx and a respx router standing in for the admin API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite
import httpx
import pytest
import respx

from admindash.cache import CacheStore
from admindash.client import ResourceClient, StaticCredentialSource
from admindash.dashboard import Dashboard
from admindash.notifications import MemoryNotificationSink

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

BASE_URL = "https://admin.example.com"


@pytest.fixture()
def api() -> Iterator[respx.MockRouter]:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture()
async def db() -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(":memory:") as conn:
        yield conn


@pytest.fixture()
def sink() -> MemoryNotificationSink:
    return MemoryNotificationSink()


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        yield client


@pytest.fixture()
async def dashboard(
    db: aiosqlite.Connection,
    http_client: httpx.AsyncClient,
    sink: MemoryNotificationSink,
    api: respx.MockRouter,
) -> AsyncIterator[Dashboard]:
    cache = CacheStore(db, tenant="acme")
    await cache.init_db()
    dash = Dashboard(
        cache=cache,
        client=ResourceClient(http_client, StaticCredentialSource("tok-123")),
        notifier=sink,
    )
    yield dash
    await dash.aclose()
