from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class FallbackMode(StrEnum):
    DEMO_SUBSTITUTE = "demo_substitute"
    LAST_KNOWN_OR_EMPTY = "last_known_or_empty"
    HARD_FAIL = "hard_fail"


class ResourceDescriptor(BaseModel):
    """Static description of one backend collection. Built once at import time."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str  # Human-readable name used in notifications
    endpoint: str  # Path relative to the API base URL
    ttl_ms: int
    fallback_mode: FallbackMode
    adapter: Callable[[Any], list[dict]]


class SectionPlan(BaseModel):
    """The resources one dashboard section needs and how long to wait for them."""

    model_config = ConfigDict(frozen=True)

    section_id: str
    resource_ids: frozenset[str]
    budget_ms: int
