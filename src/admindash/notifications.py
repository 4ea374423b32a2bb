"""Notification sinks.

The UI layer normally supplies its own sink (toasts). These two cover
headless use: LogNotificationSink forwards to structlog, and
MemoryNotificationSink records notifications so the CLI can print them.
"""

from __future__ import annotations

import structlog

from admindash.models.outcomes import Notification, Severity

log = structlog.get_logger()

_LOG_METHODS = {
    Severity.INFO: "info",
    Severity.SUCCESS: "info",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}


class LogNotificationSink:
    def notify(self, message: str, severity: Severity) -> None:
        getattr(log, _LOG_METHODS[Severity(severity)])(
            "notification", message=message, severity=str(severity)
        )


class MemoryNotificationSink:
    """Keeps every notification in order of arrival."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.notifications.append(Notification(message=message, severity=severity))

    def by_severity(self, severity: Severity) -> list[Notification]:
        return [n for n in self.notifications if n.severity == severity]

    def clear(self) -> None:
        self.notifications.clear()
