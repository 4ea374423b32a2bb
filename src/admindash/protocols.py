"""Protocol interfaces for swappable components.

Loaders, the orchestrator and the Dashboard reference these protocols, not
the concrete implementations. This allows:
- Tests to use lightweight in-memory implementations
- The session layer and the UI to plug in their own credential source and
  notification sink without touching loader code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from admindash.models.cache import CacheEntry
    from admindash.models.outcomes import Severity


class CacheProtocol(Protocol):
    """Interface for the durable per-tenant collection cache."""

    async def get(self, key: str) -> list[dict] | None: ...

    async def get_entry(self, key: str) -> CacheEntry | None: ...

    async def set(self, key: str, payload: list[dict], ttl_ms: int) -> None: ...

    async def clear(self, key: str | None = None) -> None: ...


class CredentialSource(Protocol):
    """Supplies the bearer token for the current session, or None when signed out."""

    async def get_token(self) -> str | None: ...


class NotificationSink(Protocol):
    """Receives user-visible messages (toasts, banners)."""

    def notify(self, message: str, severity: Severity) -> None: ...
