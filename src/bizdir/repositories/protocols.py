"""Protocol definitions for repository interfaces.

Each protocol mirrors the public methods of the in-memory store, so the
async SQL implementation can stand in for it behind resolve().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from bizdir.businesses.models import Business
from bizdir.core.types import BusinessStatus


@runtime_checkable
class BusinessRepository(Protocol):
    """Protocol for business storage."""

    def slug_exists(self, slug: str) -> bool: ...

    def insert(self, business: Business) -> None: ...

    def update(self, business: Business) -> None: ...

    def get(self, business_id: str) -> Business | None: ...

    def get_by_slug(self, slug: str) -> Business | None: ...

    def list_all(self) -> list[Business]: ...

    def list_by_status(self, status: BusinessStatus) -> list[Business]: ...

    def count_by_status(self) -> dict[str, int]: ...


@runtime_checkable
class SessionRepository(Protocol):
    """Protocol for browser session key-value storage."""

    def get(self, session_id: str, key: str, default: Any = None) -> Any: ...

    def put(self, session_id: str, key: str, value: Any) -> None: ...

    def has(self, session_id: str, key: str) -> bool: ...

    def forget(self, session_id: str, *keys: str) -> None: ...

    def pull(self, session_id: str, key: str, default: Any = None) -> Any: ...
