"""Telemetry sink Protocol and the simple implementations."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from bizdir.core.types import TelemetryEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class TelemetrySink(Protocol):
    """Fire-and-forget receiver of telemetry events."""

    def emit(self, event: TelemetryEvent) -> None: ...


class NullTelemetrySink:
    """Discards every event."""

    def emit(self, event: TelemetryEvent) -> None:
        return None


class RecordingTelemetrySink:
    """Keeps events in memory so tests can assert on them."""

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def emit(self, event: TelemetryEvent) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [e.action for e in self.events]

    def find(self, action: str) -> list[TelemetryEvent]:
        return [e for e in self.events if e.action == action]


class LoggingTelemetrySink:
    """Writes each event as a structured log record."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def emit(self, event: TelemetryEvent) -> None:
        logger.log(
            self._level,
            "%s on %s",
            event.action,
            event.resource,
            extra={
                "event_id": event.event_id,
                "session_id": event.session_id,
                "actor": event.actor,
                "details": event.details,
            },
        )
