"""Public directory: listing, search and detail of approved businesses."""

from __future__ import annotations

from typing import Iterable

from bizdir.businesses.errors import BusinessNotFoundError
from bizdir.businesses.models import Business
from bizdir.core.types import BusinessStatus
from bizdir.repositories import resolve
from bizdir.repositories.protocols import BusinessRepository

SEARCH_FIELDS = ("business_name", "description", "tagline", "industry", "city")


def _matches(business: Business, needle: str) -> bool:
    for name in SEARCH_FIELDS:
        value = getattr(business, name)
        if value and needle in value.casefold():
            return True
    return False


def search_directory(
    businesses: Iterable[Business],
    query: str | None = None,
    industry: str | None = None,
) -> list[Business]:
    """Approved businesses matching ``query`` and ``industry``.

    The query is a case-insensitive substring match over the name,
    description, tagline, industry and city. Featured businesses come
    first, then newest first.
    """
    needle = (query or "").strip().casefold()
    wanted_industry = (industry or "").strip().casefold()

    results = [
        b for b in businesses
        if b.status == BusinessStatus.APPROVED
        and (not needle or _matches(b, needle))
        and (not wanted_industry or b.industry.casefold() == wanted_industry)
    ]
    results.sort(key=lambda b: (b.is_featured, b.created_at), reverse=True)
    return results


class DirectoryService:
    """Read-only public view over the business repository."""

    def __init__(self, repository: BusinessRepository) -> None:
        self._repository = repository

    async def search(
        self, query: str | None = None, industry: str | None = None
    ) -> list[Business]:
        approved = await resolve(self._repository.list_by_status(BusinessStatus.APPROVED))
        return search_directory(approved, query=query, industry=industry)

    async def industries(self) -> list[str]:
        approved = await resolve(self._repository.list_by_status(BusinessStatus.APPROVED))
        return sorted({b.industry for b in approved}, key=str.casefold)

    async def find_public(self, slug: str) -> Business:
        """Approved business with this slug.

        Raises:
            BusinessNotFoundError: If there is none, or it is not approved.
        """
        business = await resolve(self._repository.get_by_slug(slug))
        if business is None or not business.is_public:
            raise BusinessNotFoundError(f"Business {slug!r} not found")
        return business
