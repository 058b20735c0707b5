"""Best-effort observability sinks.

Nothing in the application depends on a sink succeeding; callers emit
events and move on.
"""

from bizdir.telemetry.audit import AuditTrailSink
from bizdir.telemetry.sink import (
    LoggingTelemetrySink,
    NullTelemetrySink,
    RecordingTelemetrySink,
    TelemetrySink,
)

__all__ = [
    "AuditTrailSink",
    "LoggingTelemetrySink",
    "NullTelemetrySink",
    "RecordingTelemetrySink",
    "TelemetrySink",
]
