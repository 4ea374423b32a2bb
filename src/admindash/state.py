"""Dashboard state container.

DashboardState is created once per Dashboard and shared by every loader, the
orchestrator and the mutation helpers. It holds what the UI renders: the
current value of every resource collection, the per-resource loading flags
and the ActiveSection pointer read by the relevance guard.

All access happens on one event loop, so no locking is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass
class DashboardState:
    """Holds all UI-visible runtime state."""

    collections: dict[str, list[dict]] = field(default_factory=dict)
    loading_flags: dict[str, bool] = field(default_factory=dict)
    active_section: str | None = None

    @property
    def loading(self) -> Mapping[str, bool]:
        """Read-only view of the loading flags."""
        return MappingProxyType(self.loading_flags)

    def set_loading(self, resource_id: str, value: bool) -> None:
        self.loading_flags[resource_id] = value

    def is_loading(self, resource_id: str) -> bool:
        return self.loading_flags.get(resource_id, False)

    def commit(self, resource_id: str, records: list[dict]) -> None:
        self.collections[resource_id] = records

    def get(self, resource_id: str) -> list[dict]:
        return self.collections.get(resource_id, [])
