"""In-memory store for businesses."""

from __future__ import annotations

from datetime import datetime, timezone

from bizdir.businesses.errors import SlugConflictError
from bizdir.businesses.models import Business
from bizdir.core.types import BusinessStatus


class BusinessStore:
    """In-memory dict store for businesses, keyed by id with a slug index.

    Suitable for single-instance deployment and tests.
    """

    def __init__(self) -> None:
        self._businesses: dict[str, Business] = {}
        self._slugs: dict[str, str] = {}

    def slug_exists(self, slug: str) -> bool:
        return slug in self._slugs

    def insert(self, business: Business) -> None:
        if business.business_slug in self._slugs:
            raise SlugConflictError(business.business_slug)
        stored = business.model_copy(deep=True)
        self._businesses[stored.id] = stored
        self._slugs[stored.business_slug] = stored.id

    def update(self, business: Business) -> None:
        if business.id not in self._businesses:
            raise KeyError(f"Business {business.id!r} not found")
        updated = business.model_copy(
            deep=True, update={"updated_at": datetime.now(timezone.utc)}
        )
        self._businesses[updated.id] = updated

    def get(self, business_id: str) -> Business | None:
        business = self._businesses.get(business_id)
        return business.model_copy(deep=True) if business else None

    def get_by_slug(self, slug: str) -> Business | None:
        business_id = self._slugs.get(slug)
        return self.get(business_id) if business_id else None

    def list_all(self) -> list[Business]:
        return [b.model_copy(deep=True) for b in self._businesses.values()]

    def list_by_status(self, status: BusinessStatus) -> list[Business]:
        return [
            b.model_copy(deep=True)
            for b in self._businesses.values()
            if b.status == status
        ]

    def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in BusinessStatus}
        for business in self._businesses.values():
            counts[business.status.value] += 1
        return counts

    @property
    def business_count(self) -> int:
        return len(self._businesses)
