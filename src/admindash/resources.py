"""The static resource descriptor table.

One descriptor per backend collection. This is the single authoritative
source of TTLs, endpoints, envelope adapters and fallback modes; nothing
else in the package hardcodes any of them.

Fallback assignment rule: anything carrying per-tenant personal data
(rosters, mentor profiles, activity logs) is HARD_FAIL. Catalog directories
that have a built-in dataset are DEMO_SUBSTITUTE. Everything else is
LAST_KNOWN_OR_EMPTY.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from admindash.adapters import adapt_list, envelope
from admindash.errors import LoadError, LoadErrorCode
from admindash.fallback import validate_fallback_mode
from admindash.models.resources import FallbackMode, ResourceDescriptor

if TYPE_CHECKING:
    from collections.abc import Mapping

_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS

_DESCRIPTORS: list[ResourceDescriptor] = [
    ResourceDescriptor(
        id="users",
        label="students",
        endpoint="/api/admin/users",
        ttl_ms=1 * _MINUTE_MS,
        fallback_mode=FallbackMode.HARD_FAIL,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="teachers",
        label="teachers",
        endpoint="/api/admin/teachers",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.DEMO_SUBSTITUTE,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="courses",
        label="courses",
        endpoint="/api/admin/courses",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.DEMO_SUBSTITUTE,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="batches",
        label="batches",
        endpoint="/api/admin/batches",
        ttl_ms=90 * _SECOND_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=envelope("batches", "items"),
    ),
    ResourceDescriptor(
        id="one-to-one-batches",
        label="one-to-one batches",
        endpoint="/api/admin/one-to-one-batches",
        ttl_ms=90 * _SECOND_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=envelope("batches", "items"),
    ),
    ResourceDescriptor(
        id="modules",
        label="modules",
        endpoint="/api/admin/modules",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="lessons",
        label="lessons",
        endpoint="/api/admin/lessons",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="classroom-videos",
        label="classroom videos",
        endpoint="/api/admin/classroom",
        ttl_ms=2 * _MINUTE_MS,
        fallback_mode=FallbackMode.DEMO_SUBSTITUTE,
        adapter=envelope("videos", "items"),
    ),
    ResourceDescriptor(
        id="live-sessions",
        label="live classes",
        endpoint="/api/zoom/meetings",
        ttl_ms=1 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=envelope("meetings", "items"),
    ),
    ResourceDescriptor(
        id="mentors",
        label="mentors",
        endpoint="/api/admin/mentors",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.HARD_FAIL,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="projects",
        label="projects",
        endpoint="/api/admin/projects",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="assessments",
        label="assessments",
        endpoint="/api/admin/assessments",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="jobs",
        label="jobs",
        endpoint="/api/admin/jobs",
        ttl_ms=5 * _MINUTE_MS,
        fallback_mode=FallbackMode.LAST_KNOWN_OR_EMPTY,
        adapter=adapt_list,
    ),
    ResourceDescriptor(
        id="activity-log",
        label="student activity",
        endpoint="/api/admin/activity",
        ttl_ms=30 * _SECOND_MS,
        fallback_mode=FallbackMode.HARD_FAIL,
        adapter=envelope("activities", "items"),
    ),
]


def build_descriptor_table(
    descriptors: list[ResourceDescriptor],
) -> dict[str, ResourceDescriptor]:
    """Index descriptors by id, rejecting duplicates and unbacked demo fallbacks."""
    table: dict[str, ResourceDescriptor] = {}
    for descriptor in descriptors:
        if descriptor.id in table:
            raise ValueError(f"Duplicate resource id '{descriptor.id}'")
        validate_fallback_mode(descriptor)
        table[descriptor.id] = descriptor
    return table


RESOURCES: dict[str, ResourceDescriptor] = build_descriptor_table(_DESCRIPTORS)


def get_descriptor(
    resource_id: str,
    resources: Mapping[str, ResourceDescriptor] = RESOURCES,
) -> ResourceDescriptor:
    try:
        return resources[resource_id]
    except KeyError:
        raise LoadError(
            f"Unknown resource '{resource_id}'",
            code=LoadErrorCode.UNKNOWN_RESOURCE,
            resource_id=resource_id,
            recoverable=False,
        ) from None
