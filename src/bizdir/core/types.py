"""Core type definitions shared across all bizdir modules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class BusinessStatus(StrEnum):
    """Lifecycle status of a listed business."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class Role(StrEnum):
    """Caller roles recognised by the auth layer."""

    VISITOR = "visitor"
    ADMIN = "admin"


class TelemetryEvent(BaseModel):
    """A single best-effort observability event."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    actor: str = "anonymous"
    action: str
    resource: str
    details: dict[str, Any] = Field(default_factory=dict)
