"""Turns a completed onboarding submission into a persisted business."""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Any, Iterator

from bizdir.businesses.errors import PersistenceError, SlugConflictError
from bizdir.businesses.models import Business, BusinessDetails
from bizdir.core.types import BusinessStatus
from bizdir.repositories import resolve
from bizdir.repositories.protocols import BusinessRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 1000


def slugify(text: str) -> str:
    """ASCII, lower-case, hyphen-separated form of ``text``.

    Punctuation is dropped rather than turned into a separator.

    >>> slugify("Tony's Pizza & Café")
    'tonys-pizza-cafe'
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9\s-]", "", ascii_text.lower())
    slug = re.sub(r"[\s-]+", "-", slug).strip("-")
    return slug or "business"


def slug_candidates(base: str, limit: int) -> Iterator[str]:
    """``base``, ``base-2``, ``base-3``... at most ``limit`` of them."""
    if limit < 1:
        return
    yield base
    for suffix in range(2, limit + 1):
        yield f"{base}-{suffix}"


class RecordMaterializer:
    """Creates the business record for a finished onboarding.

    The slug comes from ``business_name``; taken slugs get a numeric
    suffix starting at 2. Uniqueness is checked before inserting and an
    insert that still collides (a concurrent submission won the race)
    moves on to the next suffix. The record is written in a single insert,
    so it is either stored whole or not at all.

    Args:
        repository: Business storage, sync or async.
        max_attempts: Number of slug candidates to try before giving up.
    """

    def __init__(
        self,
        repository: BusinessRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._repository = repository
        self._max_attempts = max_attempts

    async def materialize(self, merged: BusinessDetails | dict[str, Any]) -> Business:
        """Persist ``merged`` as a new pending business.

        Raises:
            PersistenceError: On any storage fault, or when every slug
                candidate is taken.
        """
        details = merged if isinstance(merged, BusinessDetails) else BusinessDetails(**merged)
        base = slugify(details.business_name)

        for candidate in slug_candidates(base, self._max_attempts):
            if await self._call(self._repository.slug_exists, candidate):
                continue

            business = Business(
                **details.model_dump(),
                business_slug=candidate,
                status=BusinessStatus.PENDING,
            )
            try:
                await self._call(self._repository.insert, business)
            except SlugConflictError:
                logger.info("Slug %r taken during insert, trying next suffix", candidate)
                continue

            logger.info("Created business %s with slug %r", business.id, candidate)
            return business

        raise PersistenceError(
            f"No free slug for {base!r} after {self._max_attempts} attempts"
        )

    @staticmethod
    async def _call(method, *args: Any) -> Any:
        try:
            return await resolve(method(*args))
        except (SlugConflictError, PersistenceError):
            raise
        except Exception as exc:
            raise PersistenceError(f"Storage failure: {exc}") from exc
