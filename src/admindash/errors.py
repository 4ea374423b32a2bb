from __future__ import annotations

from enum import StrEnum


class LoadErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    AUTH_MISSING = "AUTH_MISSING"
    UNKNOWN_RESOURCE = "UNKNOWN_RESOURCE"
    UNKNOWN_SECTION = "UNKNOWN_SECTION"


class LoadError(Exception):
    """Base class for every failure raised while loading or writing a resource.

    Transport-level subclasses (network, HTTP, timeout, parse, credential) are
    raised by the client and the response adapters and caught by
    ``ResourceLoader``, which converts them into a fallback outcome. They never
    escape the loader boundary. ``UNKNOWN_RESOURCE`` and ``UNKNOWN_SECTION``
    signal caller mistakes and do propagate.
    """

    code: LoadErrorCode = LoadErrorCode.NETWORK_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: LoadErrorCode | None = None,
        resource_id: str | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.resource_id = resource_id
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "resource_id": self.resource_id,
                "recoverable": self.recoverable,
            }
        }


class NetworkError(LoadError):
    """The request never reached the server."""

    code = LoadErrorCode.NETWORK_ERROR


class HttpError(LoadError):
    """The server answered with a non-2xx status."""

    code = LoadErrorCode.HTTP_ERROR

    def __init__(self, status: int, message: str, *, resource_id: str | None = None) -> None:
        super().__init__(message, resource_id=resource_id, recoverable=status >= 500)
        self.status = status

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["error"]["status"] = self.status
        return data


class LoadTimeoutError(LoadError):
    """A call-local timeout or a section budget elapsed."""

    code = LoadErrorCode.TIMEOUT


class ParseError(LoadError):
    """The payload did not match the shape the adapter expects."""

    code = LoadErrorCode.PARSE_ERROR

    def __init__(self, message: str, *, resource_id: str | None = None) -> None:
        super().__init__(message, resource_id=resource_id, recoverable=False)


class CredentialError(LoadError):
    """No bearer token was available from the credential source."""

    code = LoadErrorCode.AUTH_MISSING

    def __init__(self, message: str, *, resource_id: str | None = None) -> None:
        super().__init__(message, resource_id=resource_id, recoverable=False)
