"""SQL business repository (Postgres in production, SQLite in tests)."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bizdir.businesses.errors import PersistenceError, SlugConflictError
from bizdir.businesses.models import Business
from bizdir.core.types import BusinessStatus
from bizdir.db.engine import DatabaseManager
from bizdir.db.models import BusinessRow

_COLUMNS = (
    "business_name", "business_slug", "description", "tagline", "industry",
    "business_type", "primary_email", "phone_number", "website_url",
    "street_address", "city", "state_province", "postal_code", "country",
    "owner_name", "owner_email", "owner_phone", "is_verified", "is_featured",
    "verified_at", "created_at", "updated_at",
)


class SqlBusinessRepository:
    """Async SQLAlchemy-backed business storage.

    Storage faults surface as PersistenceError; a duplicate slug on insert
    surfaces as SlugConflictError.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def slug_exists(self, slug: str) -> bool:
        try:
            async with self._db.session() as db:
                result = await db.execute(
                    select(BusinessRow.id).where(BusinessRow.business_slug == slug)
                )
                return result.first() is not None
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    async def insert(self, business: Business) -> None:
        async with self._db.session() as db:
            db.add(self._to_row(business))
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                if await self.slug_exists(business.business_slug):
                    raise SlugConflictError(business.business_slug) from exc
                raise PersistenceError(str(exc)) from exc
            except SQLAlchemyError as exc:
                await db.rollback()
                raise PersistenceError(str(exc)) from exc

    async def update(self, business: Business) -> None:
        try:
            async with self._db.session() as db:
                row = await db.get(BusinessRow, business.id)
                if row is None:
                    raise KeyError(f"Business {business.id!r} not found")
                for name in _COLUMNS:
                    setattr(row, name, getattr(business, name))
                row.status = business.status.value
                row.updated_at = datetime.now(timezone.utc)
                await db.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    async def get(self, business_id: str) -> Business | None:
        async with self._db.session() as db:
            row = await db.get(BusinessRow, business_id)
            return self._to_business(row) if row else None

    async def get_by_slug(self, slug: str) -> Business | None:
        async with self._db.session() as db:
            result = await db.execute(
                select(BusinessRow).where(BusinessRow.business_slug == slug)
            )
            row = result.scalar_one_or_none()
            return self._to_business(row) if row else None

    async def list_all(self) -> list[Business]:
        async with self._db.session() as db:
            result = await db.execute(select(BusinessRow))
            return [self._to_business(r) for r in result.scalars().all()]

    async def list_by_status(self, status: BusinessStatus) -> list[Business]:
        async with self._db.session() as db:
            result = await db.execute(
                select(BusinessRow).where(BusinessRow.status == status.value)
            )
            return [self._to_business(r) for r in result.scalars().all()]

    async def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in BusinessStatus}
        async with self._db.session() as db:
            result = await db.execute(
                select(BusinessRow.status, func.count()).group_by(BusinessRow.status)
            )
            for status, count in result.all():
                counts[status] = count
        return counts

    @staticmethod
    def _to_row(business: Business) -> BusinessRow:
        return BusinessRow(
            id=business.id,
            status=business.status.value,
            **{name: getattr(business, name) for name in _COLUMNS},
        )

    @staticmethod
    def _to_business(row: BusinessRow) -> Business:
        return Business(
            id=row.id,
            status=BusinessStatus(row.status),
            **{name: getattr(row, name) for name in _COLUMNS},
        )
