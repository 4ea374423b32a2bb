"""Writes against a resource collection, followed by a targeted refresh.

After a create, update or delete succeeds, only the affected resource is
reloaded (forced, bypassing the cache) and committed to visible state. A
write never triggers a whole-section reload.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from admindash.errors import LoadError
from admindash.models.outcomes import Severity
from admindash.resources import RESOURCES, get_descriptor

if TYPE_CHECKING:
    from collections.abc import Mapping

    from admindash.client import ResourceClient
    from admindash.loader import ResourceLoader
    from admindash.models.outcomes import LoadResult
    from admindash.models.resources import ResourceDescriptor
    from admindash.protocols import NotificationSink
    from admindash.state import DashboardState

log = structlog.get_logger()


class MutationRefresh:
    def __init__(
        self,
        loaders: Mapping[str, ResourceLoader],
        client: ResourceClient,
        state: DashboardState,
        notifier: NotificationSink,
        *,
        resources: Mapping[str, ResourceDescriptor] = RESOURCES,
    ) -> None:
        self._loaders = loaders
        self._client = client
        self._state = state
        self._notifier = notifier
        self._resources = resources

    async def refresh(self, resource_id: str) -> LoadResult:
        """Force-reload one resource and commit it to visible state."""
        descriptor = get_descriptor(resource_id, self._resources)
        result = await self._loaders[descriptor.id].load(force_refresh=True)
        if result.outdated:
            # A later write or cache clear started a newer refresh; it commits
            log.info("mutation_refresh_outdated", resource_id=descriptor.id)
            return result
        self._state.commit(descriptor.id, result.records)
        log.info("mutation_refresh_complete", resource_id=descriptor.id, source=str(result.source))
        return result

    async def create(self, resource_id: str, payload: dict[str, Any]) -> Any:
        descriptor = get_descriptor(resource_id, self._resources)
        return await self._write(descriptor, "POST", descriptor.endpoint, payload, "Created")

    async def update(self, resource_id: str, item_id: str, payload: dict[str, Any]) -> Any:
        descriptor = get_descriptor(resource_id, self._resources)
        path = f"{descriptor.endpoint}/{item_id}"
        return await self._write(descriptor, "PUT", path, payload, "Updated")

    async def delete(self, resource_id: str, item_id: str) -> Any:
        descriptor = get_descriptor(resource_id, self._resources)
        path = f"{descriptor.endpoint}/{item_id}"
        return await self._write(descriptor, "DELETE", path, None, "Deleted")

    async def _write(
        self,
        descriptor: ResourceDescriptor,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        verb: str,
    ) -> Any:
        """Send the write; on success refresh the resource. Raises LoadError on failure."""
        mlog = log.bind(resource_id=descriptor.id, method=method, path=path)
        try:
            body = await self._client.request(
                method, path, json=payload, resource_id=descriptor.id
            )
        except LoadError as exc:
            mlog.warning("mutation_failed", error_code=str(exc.code), error=exc.message)
            self._notifier.notify(f"Error: {exc.message}", Severity.ERROR)
            raise

        mlog.info("mutation_complete")
        self._notifier.notify(f"{verb} successfully!", Severity.SUCCESS)
        # Fetches started before the write must not answer or overwrite this refresh
        self._loaders[descriptor.id].invalidate()
        await self.refresh(descriptor.id)
        return body
