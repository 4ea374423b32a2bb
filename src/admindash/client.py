"""Authenticated HTTP client for the admin resource API.

All network I/O goes through a single ResourceClient shared by every loader.
The ResourceClient receives an httpx.AsyncClient via constructor injection;
the Dashboard lifespan owns the client lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from admindash import __version__
from admindash.errors import (
    CredentialError,
    HttpError,
    LoadTimeoutError,
    NetworkError,
    ParseError,
)

if TYPE_CHECKING:
    from admindash.protocols import CredentialSource

log = structlog.get_logger()


def build_http_client(base_url: str) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup.

    No client-level timeout: each loader enforces its own call-local timeout.
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(None),
        headers={"User-Agent": f"admindash/{__version__}", "Accept": "application/json"},
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        ),
    )


class StaticCredentialSource:
    """Credential source backed by a fixed token, e.g. from settings."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    async def get_token(self) -> str | None:
        return self._token


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable ``message`` out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return f"HTTP {response.status_code}"


class ResourceClient:
    """Issues bearer-authenticated requests and maps failures onto LoadError types."""

    def __init__(self, client: httpx.AsyncClient, credentials: CredentialSource) -> None:
        self._client = client
        self._credentials = credentials

    async def get_json(self, path: str, *, resource_id: str | None = None) -> Any:
        """GET a collection endpoint and return the decoded JSON body."""
        return await self.request("GET", path, resource_id=resource_id)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        resource_id: str | None = None,
    ) -> Any:
        """Send one request. Raises a LoadError subclass on every failure."""
        token = await self._credentials.get_token()
        if not token:
            raise CredentialError("No session token available", resource_id=resource_id)

        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TimeoutException as exc:
            raise LoadTimeoutError(
                f"Timed out calling {method} {path}", resource_id=resource_id
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Network error calling {method} {path}: {exc}", resource_id=resource_id
            ) from exc

        if not response.is_success:
            log.warning(
                "request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                resource_id=resource_id,
            )
            raise HttpError(response.status_code, _error_message(response), resource_id=resource_id)

        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as exc:
            raise ParseError(
                f"Response from {path} is not valid JSON", resource_id=resource_id
            ) from exc

        log.debug(
            "request_complete",
            method=method,
            path=path,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return body
