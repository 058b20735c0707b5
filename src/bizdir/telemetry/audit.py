"""Append-only audit trail sink.

Events are written one per line to a JSONL file. Every line carries the
SHA-256 of the previous line's hash plus its own event JSON, so editing
or removing an earlier line breaks verification for everything after it.
Admin decisions and final onboarding submissions are the events operators
most care about here.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from bizdir.core.config import TelemetryConfig
from bizdir.core.types import TelemetryEvent

_GENESIS_SEED = b"bizdir-audit-genesis"


class AuditRecord:
    """A telemetry event together with its position in the hash chain."""

    def __init__(self, event: TelemetryEvent, previous_hash: str, record_hash: str) -> None:
        self.event = event
        self.previous_hash = previous_hash
        self.record_hash = record_hash

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous_hash": self.previous_hash,
            "record_hash": self.record_hash,
            "event": json.loads(self.event.model_dump_json()),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditRecord:
        return cls(
            event=TelemetryEvent(**data["event"]),
            previous_hash=data["previous_hash"],
            record_hash=data["record_hash"],
        )


def _genesis_hash() -> str:
    return hashlib.sha256(_GENESIS_SEED).hexdigest()


def _chain_hash(previous_hash: str, event_json: str) -> str:
    return hashlib.sha256((previous_hash + event_json).encode("utf-8")).hexdigest()


def _as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class AuditTrailSink:
    """Hash-chained JSONL telemetry sink.

    Args:
        config: TelemetryConfig supplying ``log_dir`` and ``log_file``.
            Defaults to TelemetryConfig() which reads the environment.
    """

    def __init__(self, config: TelemetryConfig | None = None) -> None:
        self._config = config or TelemetryConfig()
        log_dir = Path(self._config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        self._path = log_dir / self._config.log_file
        self._last_hash = _genesis_hash()
        if self._path.exists():
            self._last_hash = self._read_last_hash()

    def _read_last_hash(self) -> str:
        last_hash = _genesis_hash()
        for record in self._iter_records():
            last_hash = record.record_hash
        return last_hash

    def _iter_records(self):
        if not self._path.exists():
            return
        with open(self._path) as fh:
            for line in fh:
                stripped = line.strip()
                if stripped:
                    yield AuditRecord.from_dict(json.loads(stripped))

    def emit(self, event: TelemetryEvent) -> None:
        self.append(event)

    def append(self, event: TelemetryEvent) -> AuditRecord:
        """Append ``event`` to the trail and return its chain record."""
        record = AuditRecord(
            event=event,
            previous_hash=self._last_hash,
            record_hash=_chain_hash(self._last_hash, event.model_dump_json()),
        )
        with open(self._path, "a") as fh:
            fh.write(json.dumps(record.to_dict()) + "\n")
        self._last_hash = record.record_hash
        return record

    def verify_chain(self) -> bool:
        """Recompute every hash; False as soon as one link does not match."""
        expected_previous = _genesis_hash()
        for record in self._iter_records():
            if record.previous_hash != expected_previous:
                return False
            recomputed = _chain_hash(expected_previous, record.event.model_dump_json())
            if record.record_hash != recomputed:
                return False
            expected_previous = record.record_hash
        return True

    def query(self, filters: dict[str, Any] | None = None) -> list[TelemetryEvent]:
        """Return events matching all given filters.

        Exact-match keys: ``action``, ``actor``, ``resource``, ``session_id``.
        ``after`` and ``before`` take ISO datetime strings (naive values are
        treated as UTC) and are exclusive bounds.
        """
        filters = filters or {}
        after = _as_utc(filters["after"]) if "after" in filters else None
        before = _as_utc(filters["before"]) if "before" in filters else None

        matches: list[TelemetryEvent] = []
        for record in self._iter_records():
            event = record.event
            if any(
                key in filters and getattr(event, key) != filters[key]
                for key in ("action", "actor", "resource", "session_id")
            ):
                continue
            if after is not None and event.timestamp <= after:
                continue
            if before is not None and event.timestamp >= before:
                continue
            matches.append(event)
        return matches

    @property
    def path(self) -> Path:
        return self._path

    @property
    def last_hash(self) -> str:
        return self._last_hash
