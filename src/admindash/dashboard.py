"""UI-facing facade.

The presentation layer talks only to a Dashboard: it navigates between
sections, asks for individual collections, refreshes after writes and reads
the in-memory collections, loading flags and derived statistics. Every
collaborator is injected, so tests can wire an isolated Dashboard per case.

``open_dashboard`` is the lifespan: it owns the aiosqlite connection and the
httpx client, and cancels outstanding background loads on exit.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite
import structlog

from admindash.cache import CacheStore
from admindash.client import ResourceClient, StaticCredentialSource, build_http_client
from admindash.loader import ResourceLoader
from admindash.mutations import MutationRefresh
from admindash.notifications import LogNotificationSink
from admindash.orchestrator import LoadOrchestrator
from admindash.resources import RESOURCES, get_descriptor
from admindash.sections import SECTIONS
from admindash.state import DashboardState
from admindash.stats import DashboardStats, compute_stats

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Mapping

    from admindash.config import Settings
    from admindash.models.outcomes import LoadResult, SectionOutcome
    from admindash.models.resources import ResourceDescriptor, SectionPlan
    from admindash.protocols import CacheProtocol, CredentialSource, NotificationSink

log = structlog.get_logger()


class Dashboard:
    def __init__(
        self,
        *,
        cache: CacheProtocol,
        client: ResourceClient,
        notifier: NotificationSink,
        timeout_seconds: float = 10.0,
        resources: Mapping[str, ResourceDescriptor] = RESOURCES,
        plans: Mapping[str, SectionPlan] = SECTIONS,
    ) -> None:
        self.state = DashboardState()
        self._cache = cache
        self._resources = resources
        self.loaders: dict[str, ResourceLoader] = {
            rid: ResourceLoader(
                descriptor,
                cache=cache,
                client=client,
                state=self.state,
                notifier=notifier,
                timeout_seconds=timeout_seconds,
            )
            for rid, descriptor in resources.items()
        }
        self.orchestrator = LoadOrchestrator(self.loaders, self.state, notifier, plans=plans)
        self.mutations = MutationRefresh(
            self.loaders, client, self.state, notifier, resources=resources
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def loading(self) -> Mapping[str, bool]:
        return self.state.loading

    @property
    def collections(self) -> Mapping[str, list[dict]]:
        return self.state.collections

    @property
    def active_section(self) -> str | None:
        return self.state.active_section

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self.state.collections)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def navigate(self, section_id: str) -> SectionOutcome:
        """Switch to a section and force-refresh everything it needs."""
        return await self.orchestrator.run_section(section_id)

    async def load(self, resource_id: str, force_refresh: bool = False) -> list[dict]:
        """Load one collection, commit it to state and return it."""
        descriptor = get_descriptor(resource_id, self._resources)
        result: LoadResult = await self.loaders[descriptor.id].load(force_refresh)
        if not result.outdated:
            self.state.commit(descriptor.id, result.records)
        return result.records

    async def load_users(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("users", force_refresh)

    async def load_teachers(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("teachers", force_refresh)

    async def load_courses(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("courses", force_refresh)

    async def load_batches(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("batches", force_refresh)

    async def load_one_to_one_batches(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("one-to-one-batches", force_refresh)

    async def load_modules(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("modules", force_refresh)

    async def load_lessons(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("lessons", force_refresh)

    async def load_classroom_videos(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("classroom-videos", force_refresh)

    async def load_live_sessions(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("live-sessions", force_refresh)

    async def load_mentors(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("mentors", force_refresh)

    async def load_projects(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("projects", force_refresh)

    async def load_assessments(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("assessments", force_refresh)

    async def load_jobs(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("jobs", force_refresh)

    async def load_activity_log(self, force_refresh: bool = False) -> list[dict]:
        return await self.load("activity-log", force_refresh)

    async def refresh_data(self, resource_id: str | None = None) -> None:
        """Refresh one resource, or re-run the active section when none is given."""
        if resource_id is not None:
            await self.mutations.refresh(resource_id)
            return
        if self.state.active_section is not None:
            await self.orchestrator.run_section(self.state.active_section)

    async def clear_cache(self, key: str | None = None) -> None:
        """Drop cached collections for this tenant, or just ``key``.

        Fetches already in flight are invalidated too, so a load still pending
        from an earlier section cannot write its result back after the clear.
        """
        for resource_id, loader in self.loaders.items():
            if key is None or key == resource_id:
                loader.invalidate()
        await self._cache.clear(key)

    async def aclose(self) -> None:
        """Cancel background section loads and in-flight fetches."""
        await self.orchestrator.cancel_background()
        for loader in self.loaders.values():
            await loader.aclose()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, resource_id: str, payload: dict[str, Any]) -> Any:
        return await self.mutations.create(resource_id, payload)

    async def update(self, resource_id: str, item_id: str, payload: dict[str, Any]) -> Any:
        return await self.mutations.update(resource_id, item_id, payload)

    async def delete(self, resource_id: str, item_id: str) -> Any:
        return await self.mutations.delete(resource_id, item_id)


@asynccontextmanager
async def open_dashboard(
    settings: Settings,
    *,
    credentials: CredentialSource | None = None,
    notifier: NotificationSink | None = None,
) -> AsyncGenerator[Dashboard, None]:
    """Create a fully wired Dashboard and tear it down on exit."""
    db_path = settings.cache.db_path
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        cache = CacheStore(db, namespace=settings.cache.namespace, tenant=settings.cache.tenant)
        await cache.init_db()

        async with build_http_client(settings.api.base_url) as http_client:
            client = ResourceClient(
                http_client, credentials or StaticCredentialSource(settings.api.token)
            )
            dashboard = Dashboard(
                cache=cache,
                client=client,
                notifier=notifier or LogNotificationSink(),
                timeout_seconds=settings.api.timeout_seconds,
            )
            log.info("dashboard_ready", tenant=settings.cache.tenant, db_path=db_path)
            try:
                yield dashboard
            finally:
                await dashboard.aclose()
                log.info("dashboard_closed")
