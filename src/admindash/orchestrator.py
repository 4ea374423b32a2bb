"""Section load orchestration.

``run_section`` fans out a forced refresh to every loader the section's plan
names and waits at most ``budget_ms`` for them. Loads still pending when the
budget elapses are not cancelled: they keep running as background tasks and
still write through to the cache when they finish.

Whether a settled result reaches visible state is decided by the relevance
guard at the moment it settles: the result is committed only if the
ActiveSection is still the section it was fetched for. Otherwise it is
dropped from the live view (the cache write has already happened inside the
loader).

A new ``run_section`` call supersedes the previous one. The previous call
returns immediately with a ``superseded`` status and its remaining loads are
left to the relevance guard. Since loaders coalesce concurrent fetches,
rapid switching never stacks more than one request per resource.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from admindash.models.outcomes import LoadResult, SectionOutcome, SectionStatus, Severity
from admindash.sections import SECTIONS, get_plan

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from admindash.loader import ResourceLoader
    from admindash.models.resources import SectionPlan
    from admindash.protocols import NotificationSink
    from admindash.state import DashboardState

log = structlog.get_logger()


@dataclass
class _SectionRun:
    """Book-keeping for one run_section call."""

    plan: SectionPlan
    superseded: asyncio.Event = field(default_factory=asyncio.Event)
    # Set once run_section has reported; later settlements notify on their own
    reported: bool = False
    committed: list[str] = field(default_factory=list)
    discarded: list[str] = field(default_factory=list)

    @property
    def section_id(self) -> str:
        return self.plan.section_id


class LoadOrchestrator:
    def __init__(
        self,
        loaders: Mapping[str, ResourceLoader],
        state: DashboardState,
        notifier: NotificationSink,
        *,
        plans: Mapping[str, SectionPlan] = SECTIONS,
    ) -> None:
        self._loaders = loaders
        self._state = state
        self._notifier = notifier
        self._plans = plans
        self._current: _SectionRun | None = None
        self._background: set[asyncio.Task[LoadResult | None]] = set()

    @property
    def background_count(self) -> int:
        return len(self._background)

    async def run_section(self, section_id: str) -> SectionOutcome:
        """Load everything ``section_id`` needs and report one aggregated outcome."""
        plan = get_plan(section_id, self._plans)
        slog = log.bind(section_id=section_id)

        if self._current is not None:
            self._current.superseded.set()
        run = _SectionRun(plan=plan)
        self._current = run
        self._state.active_section = section_id

        started = time.monotonic()
        slog.info("section_load_started", resources=sorted(plan.resource_ids))

        tasks: dict[str, asyncio.Task[LoadResult | None]] = {}
        for resource_id in sorted(plan.resource_ids):
            task = asyncio.create_task(
                self._load_and_commit(run, resource_id),
                name=f"section:{section_id}:{resource_id}",
            )
            self._background.add(task)
            task.add_done_callback(self._background.discard)
            tasks[resource_id] = task

        await self._wait(run, tasks.values(), plan.budget_ms / 1000)
        run.reported = True
        elapsed_ms = round((time.monotonic() - started) * 1000, 1)

        pending: list[str] = []
        settled: dict[str, LoadResult | None] = {}
        for rid, task in tasks.items():
            if not task.done():
                pending.append(rid)
            elif task.cancelled():
                settled[rid] = None
            else:
                settled[rid] = task.result()
        failed = [
            rid
            for rid, result in settled.items()
            if result is None or not (result.ok or result.outdated)
        ]

        if run.superseded.is_set():
            status = SectionStatus.SUPERSEDED
        elif pending:
            status = SectionStatus.TIMEOUT
        elif failed:
            status = SectionStatus.PARTIAL
        else:
            status = SectionStatus.COMPLETE

        outcome = SectionOutcome(
            section_id=section_id,
            status=status,
            committed=sorted(run.committed),
            failed=sorted(failed),
            pending=sorted(pending),
            discarded=sorted(run.discarded),
            elapsed_ms=elapsed_ms,
        )

        if status != SectionStatus.SUPERSEDED:
            self._report(plan, outcome, settled)

        slog.info(
            "section_load_finished",
            status=str(status),
            committed=outcome.committed,
            failed=outcome.failed,
            pending=outcome.pending,
            elapsed_ms=elapsed_ms,
        )
        return outcome

    async def drain(self) -> None:
        """Wait for every background load to settle."""
        while self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def cancel_background(self) -> None:
        """Cancel outstanding loads. Used at shutdown only."""
        for task in list(self._background):
            task.cancel()
        await asyncio.gather(*self._background, return_exceptions=True)

    async def _wait(
        self,
        run: _SectionRun,
        tasks: Iterable[asyncio.Task[LoadResult | None]],
        timeout: float,
    ) -> None:
        """Wait until every task settles, the budget elapses, or the run is superseded."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        pending: set[asyncio.Task] = set(tasks)
        superseded = asyncio.create_task(run.superseded.wait())
        try:
            while pending and not run.superseded.is_set():
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                _, pending = await asyncio.wait(
                    pending | {superseded},
                    timeout=remaining,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                pending.discard(superseded)
        finally:
            superseded.cancel()

    async def _load_and_commit(self, run: _SectionRun, resource_id: str) -> LoadResult | None:
        rlog = log.bind(section_id=run.section_id, resource_id=resource_id)
        try:
            result = await self._loaders[resource_id].load(force_refresh=True, notify=False)
        except Exception:
            rlog.warning("section_resource_error", exc_info=True)
            return None

        if result.outdated:
            run.discarded.append(resource_id)
            rlog.info("outdated_result_discarded")
            return result

        # Relevance guard: evaluated when the result settles, not when it was requested
        if self._state.active_section != run.section_id:
            run.discarded.append(resource_id)
            rlog.info("stale_result_discarded", active_section=self._state.active_section)
            return result

        self._state.commit(resource_id, result.records)
        run.committed.append(resource_id)

        if run.reported and result.notification is not None:
            # Budget already elapsed; the aggregate went out without this one
            self._notifier.notify(result.notification.message, result.notification.severity)
        return result

    def _report(
        self,
        plan: SectionPlan,
        outcome: SectionOutcome,
        settled: Mapping[str, LoadResult | None],
    ) -> None:
        failed = [settled[rid] for rid in outcome.failed]
        visible = [r for r in failed if r is not None and r.notification is not None]
        crashed = [rid for rid in outcome.failed if settled[rid] is None]

        if visible or crashed:
            severity = (
                Severity.ERROR
                if crashed or any(r.notification.severity == Severity.ERROR for r in visible)
                else Severity.WARNING
            )
            if len(visible) == 1 and not crashed:
                message = visible[0].notification.message
            else:
                names = sorted({*(r.resource_id for r in visible), *crashed})
                message = f"Some data failed to load: {', '.join(names)}"
            self._notifier.notify(message, severity)

        if outcome.status == SectionStatus.TIMEOUT:
            self._notifier.notify(
                f"Loading {plan.section_id} is taking longer than expected. Try refreshing.",
                Severity.WARNING,
            )
