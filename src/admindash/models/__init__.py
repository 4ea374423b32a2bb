from __future__ import annotations

from admindash.models.cache import CacheEntry
from admindash.models.outcomes import (
    LoadResult,
    LoadSource,
    Notification,
    SectionOutcome,
    SectionStatus,
    Severity,
)
from admindash.models.resources import FallbackMode, ResourceDescriptor, SectionPlan

__all__ = [
    # cache
    "CacheEntry",
    # resources
    "FallbackMode",
    "ResourceDescriptor",
    "SectionPlan",
    # outcomes
    "LoadResult",
    "LoadSource",
    "Notification",
    "SectionOutcome",
    "SectionStatus",
    "Severity",
]
