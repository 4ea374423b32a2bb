"""Fallback policy: what a resource shows when its load fails.

The mode is fixed per resource in the descriptor table and never inferred
at runtime:

- DEMO_SUBSTITUTE      built-in catalog dataset, no user-visible notification
- LAST_KNOWN_OR_EMPTY  last cached payload for this tenant (even if expired),
                       else ``[]``; always a warning
- HARD_FAIL            ``[]`` and an error; never demo data, never the cache
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from admindash.demo_data import get_demo_dataset, has_demo_dataset
from admindash.models.outcomes import LoadResult, LoadSource, Notification, Severity
from admindash.models.resources import FallbackMode

if TYPE_CHECKING:
    from admindash.errors import LoadError
    from admindash.models.resources import ResourceDescriptor
    from admindash.protocols import CacheProtocol

log = structlog.get_logger()


def validate_fallback_mode(descriptor: ResourceDescriptor) -> None:
    """Reject a DEMO_SUBSTITUTE descriptor that has no dataset to substitute."""
    if descriptor.fallback_mode == FallbackMode.DEMO_SUBSTITUTE and not has_demo_dataset(
        descriptor.id
    ):
        raise ValueError(f"Resource '{descriptor.id}' uses demo fallback but has no demo dataset")


async def resolve_fallback(
    descriptor: ResourceDescriptor,
    error: LoadError,
    cache: CacheProtocol,
) -> LoadResult:
    """Turn a failed load into the result this resource's policy prescribes."""
    mode = descriptor.fallback_mode
    flog = log.bind(resource_id=descriptor.id, mode=str(mode), error_code=str(error.code))

    if mode == FallbackMode.DEMO_SUBSTITUTE:
        flog.info("fallback_demo_substituted", reason=error.message)
        return LoadResult(
            resource_id=descriptor.id,
            records=get_demo_dataset(descriptor.id),
            source=LoadSource.DEMO,
            error=error,
        )

    if mode == FallbackMode.LAST_KNOWN_OR_EMPTY:
        entry = await cache.get_entry(descriptor.id)
        if entry is not None:
            flog.warning("fallback_last_known", stored_at=entry.stored_at)
            return LoadResult(
                resource_id=descriptor.id,
                records=entry.payload,
                source=LoadSource.LAST_KNOWN,
                error=error,
                notification=Notification(
                    message=f"Couldn't refresh {descriptor.label}; showing previously loaded data.",
                    severity=Severity.WARNING,
                ),
            )
        flog.warning("fallback_empty", reason="no_cached_value")
        return LoadResult(
            resource_id=descriptor.id,
            records=[],
            source=LoadSource.EMPTY,
            error=error,
            notification=Notification(
                message=f"Couldn't load {descriptor.label}.",
                severity=Severity.WARNING,
            ),
        )

    flog.error("fallback_hard_fail", reason=error.message)
    return LoadResult(
        resource_id=descriptor.id,
        records=[],
        source=LoadSource.EMPTY,
        error=error,
        notification=Notification(
            message=f"Failed to load {descriptor.label}: {error.message}",
            severity=Severity.ERROR,
        ),
    )
