"""Shared test fixtures for the admindash test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import aiosqlite
import pytest

from admindash.cache import CacheStore
from admindash.loader import ResourceLoader
from admindash.models.resources import ResourceDescriptor
from admindash.notifications import MemoryNotificationSink
from admindash.resources import RESOURCES
from admindash.state import DashboardState


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now_ms: float = 0.0) -> None:
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


# A body, an exception to raise, or a coroutine function to await
Handler = Any


class FakeResourceClient:
    """Stands in for ResourceClient with scripted per-route responses.

    A route may be a plain value (returned as the decoded body), an exception
    instance (raised), or a zero-argument coroutine function (awaited, so it
    can sleep to simulate a slow backend).
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.calls: list[str] = []

    def route(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def call_count(self, path: str) -> int:
        return self.calls.count(path)

    async def get_json(self, path: str, *, resource_id: str | None = None) -> Any:
        return await self.request("GET", path, resource_id=resource_id)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        resource_id: str | None = None,
    ) -> Any:
        # Reads are keyed by bare path, writes by "METHOD path"
        key = path if method == "GET" else f"{method} {path}"
        self.calls.append(key)
        handler = self.routes[key]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return await handler()
        return handler


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(now_ms=1_700_000_000_000.0)


@pytest.fixture()
async def db() -> aiosqlite.Connection:
    async with aiosqlite.connect(":memory:") as conn:
        yield conn


@pytest.fixture()
async def cache(db: aiosqlite.Connection, clock: FakeClock) -> CacheStore:
    store = CacheStore(db, namespace="admindash", tenant="acme", clock=clock)
    await store.init_db()
    return store


@pytest.fixture()
def state() -> DashboardState:
    return DashboardState()


@pytest.fixture()
def sink() -> MemoryNotificationSink:
    return MemoryNotificationSink()


@pytest.fixture()
def fake_client() -> FakeResourceClient:
    return FakeResourceClient()


@pytest.fixture()
def make_loader(
    cache: CacheStore,
    fake_client: FakeResourceClient,
    state: DashboardState,
    sink: MemoryNotificationSink,
) -> Callable[..., ResourceLoader]:
    """Build a ResourceLoader wired to the shared fixtures."""

    def factory(
        resource: str | ResourceDescriptor, *, timeout_seconds: float = 10.0
    ) -> ResourceLoader:
        descriptor = RESOURCES[resource] if isinstance(resource, str) else resource
        return ResourceLoader(
            descriptor,
            cache=cache,
            client=fake_client,  # type: ignore[arg-type]
            state=state,
            notifier=sink,
            timeout_seconds=timeout_seconds,
        )

    return factory
