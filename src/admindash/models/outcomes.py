from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from admindash.errors import LoadError


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    severity: Severity


class LoadSource(StrEnum):
    CACHE = "cache"
    NETWORK = "network"
    DEMO = "demo"
    LAST_KNOWN = "last_known"
    EMPTY = "empty"


class LoadResult(BaseModel):
    """What a single ResourceLoader run produced."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    resource_id: str
    records: list[dict]
    source: LoadSource
    error: LoadError | None = None
    notification: Notification | None = None  # Set when the failure is user-visible
    # Produced by a fetch that started before the loader was invalidated
    outdated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class SectionStatus(StrEnum):
    COMPLETE = "complete"  # Every resource loaded from the network or cache
    PARTIAL = "partial"  # All settled, at least one fell back
    TIMEOUT = "timeout"  # The budget elapsed with loads still pending
    SUPERSEDED = "superseded"  # Another section load started before this one finished


class SectionOutcome(BaseModel):
    section_id: str
    status: SectionStatus
    committed: list[str] = []  # Applied to visible state
    failed: list[str] = []  # Settled with a fallback result
    pending: list[str] = []  # Still running when the budget elapsed
    discarded: list[str] = []  # Settled after the user navigated away
    elapsed_ms: float = 0.0
