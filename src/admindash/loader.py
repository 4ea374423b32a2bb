"""Per-resource loader: cache lookup, network fetch, adaptation and fallback.

One ResourceLoader exists per descriptor. ``load()`` never raises for
transport or payload failures: network errors, non-2xx responses, timeouts
and malformed payloads are all converted into the resource's fallback
result. Concurrent loads that need the network share a single in-flight
task, so N simultaneous callers cost one request.

``invalidate()`` starts a new generation. A fetch begun under an older
generation still answers the callers already waiting on it, but it no longer
writes the cache and its result comes back marked ``outdated`` so callers
leave visible state alone.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from admindash.errors import LoadError, LoadTimeoutError
from admindash.fallback import resolve_fallback
from admindash.models.outcomes import LoadResult, LoadSource

if TYPE_CHECKING:
    from admindash.client import ResourceClient
    from admindash.models.resources import ResourceDescriptor
    from admindash.protocols import CacheProtocol, NotificationSink
    from admindash.state import DashboardState

DEFAULT_CALL_TIMEOUT_SECONDS = 10.0


class ResourceLoader:
    def __init__(
        self,
        descriptor: ResourceDescriptor,
        *,
        cache: CacheProtocol,
        client: ResourceClient,
        state: DashboardState,
        notifier: NotificationSink,
        timeout_seconds: float = DEFAULT_CALL_TIMEOUT_SECONDS,
    ) -> None:
        self.descriptor = descriptor
        self._cache = cache
        self._client = client
        self._state = state
        self._notifier = notifier
        self._timeout = timeout_seconds
        self._generation = 0
        self._inflight: asyncio.Task[LoadResult] | None = None
        self._notified: asyncio.Task[LoadResult] | None = None
        # Every fetch task still running, including ones orphaned by invalidate()
        self._tasks: set[asyncio.Task[LoadResult]] = set()
        self._log = structlog.get_logger().bind(resource_id=descriptor.id)

    @property
    def resource_id(self) -> str:
        return self.descriptor.id

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def invalidate(self) -> None:
        """Stop the current in-flight fetch from being shared or cached.

        Called after a write or a cache clear: the next load starts a fresh
        request, and whatever the older fetch returns is treated as outdated.
        """
        self._generation += 1
        self._inflight = None
        self._log.debug("loader_invalidated", generation=self._generation)

    async def load(self, force_refresh: bool = False, *, notify: bool = True) -> LoadResult:
        """Return the collection for this resource.

        Without ``force_refresh`` a fresh cache entry is returned with no I/O.
        ``notify=False`` leaves user-visible fallback messages to the caller
        (the orchestrator rolls them into one section-level notification).
        """
        if not force_refresh:
            cached = await self._cache.get(self.descriptor.id)
            if cached is not None:
                self._log.debug("cache_hit")
                return LoadResult(
                    resource_id=self.descriptor.id,
                    records=cached,
                    source=LoadSource.CACHE,
                )
            self._log.debug("cache_miss")

        generation = self._generation
        task = self._inflight
        if task is None or task.done():
            task = asyncio.create_task(
                self._fetch(generation), name=f"load:{self.descriptor.id}"
            )
            self._inflight = task
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            self._log.debug("load_coalesced")

        # Shielded: a cancelled caller must not cancel the fetch other callers share
        result = await asyncio.shield(task)

        if generation != self._generation:
            self._log.info("outdated_result", generation=generation)
            return result.model_copy(update={"outdated": True})

        if notify and result.notification is not None and self._notified is not task:
            self._notified = task
            self._notifier.notify(result.notification.message, result.notification.severity)
        return result

    async def _fetch(self, generation: int) -> LoadResult:
        descriptor = self.descriptor
        self._state.set_loading(descriptor.id, True)
        started = time.monotonic()
        try:
            try:
                raw = await asyncio.wait_for(
                    self._client.get_json(descriptor.endpoint, resource_id=descriptor.id),
                    timeout=self._timeout,
                )
                records = descriptor.adapter(raw)
            except TimeoutError:
                error: LoadError = LoadTimeoutError(
                    f"{descriptor.label} did not respond within {self._timeout:g}s",
                    resource_id=descriptor.id,
                )
            except LoadError as exc:
                error = exc
            else:
                if generation == self._generation:
                    await self._cache.set(descriptor.id, records, descriptor.ttl_ms)
                else:
                    self._log.info("outdated_fetch_not_cached", generation=generation)
                self._log.info(
                    "load_complete",
                    records=len(records),
                    elapsed_ms=round((time.monotonic() - started) * 1000),
                )
                return LoadResult(
                    resource_id=descriptor.id,
                    records=records,
                    source=LoadSource.NETWORK,
                )

            if error.resource_id is None:
                error.resource_id = descriptor.id
            self._log.warning(
                "load_failed",
                error_code=str(error.code),
                error=error.message,
                elapsed_ms=round((time.monotonic() - started) * 1000),
            )
            return await resolve_fallback(descriptor, error, self._cache)
        finally:
            # A newer fetch owns the flag once this one has been invalidated
            if not self.in_flight or self._inflight is asyncio.current_task():
                self._state.set_loading(descriptor.id, False)

    async def aclose(self) -> None:
        """Cancel every running fetch. Used at shutdown only."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight = None
