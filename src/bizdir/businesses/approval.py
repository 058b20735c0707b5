"""Admin review of submitted businesses.

Status moves ``pending -> approved | rejected`` and ``approved ->
suspended``. Anything else is refused. Featured and verified are flags
independent of status.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from bizdir.businesses.errors import BusinessNotFoundError, InvalidTransitionError
from bizdir.businesses.models import Business, DashboardStatistics
from bizdir.core.types import BusinessStatus, TelemetryEvent
from bizdir.repositories import resolve
from bizdir.repositories.protocols import BusinessRepository
from bizdir.telemetry.sink import NullTelemetrySink, TelemetrySink

logger = logging.getLogger(__name__)

_ALLOWED: dict[BusinessStatus, set[BusinessStatus]] = {
    BusinessStatus.PENDING: {BusinessStatus.APPROVED, BusinessStatus.REJECTED},
    BusinessStatus.APPROVED: {BusinessStatus.SUSPENDED},
    BusinessStatus.REJECTED: set(),
    BusinessStatus.SUSPENDED: set(),
}


class BusinessApprovalService:
    """Admin actions on businesses.

    Works against a sync or async BusinessRepository. Every change is
    reported to the telemetry sink with the acting admin as actor.
    """

    def __init__(
        self,
        repository: BusinessRepository,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        self._repository = repository
        self._telemetry = telemetry or NullTelemetrySink()

    async def get(self, business_id: str) -> Business:
        """Fetch a business of any status.

        Raises:
            BusinessNotFoundError: If no business has this id.
        """
        business = await resolve(self._repository.get(business_id))
        if business is None:
            raise BusinessNotFoundError(f"Business {business_id!r} not found")
        return business

    async def approve(self, business_id: str, admin: str) -> Business:
        """Approve a pending business, making it public.

        Raises:
            BusinessNotFoundError: If no business has this id.
            InvalidTransitionError: If the business is not pending.
        """
        return await self._transition(business_id, BusinessStatus.APPROVED, admin)

    async def reject(self, business_id: str, admin: str, reason: str | None = None) -> Business:
        """Reject a pending business.

        Raises:
            BusinessNotFoundError: If no business has this id.
            InvalidTransitionError: If the business is not pending.
        """
        return await self._transition(
            business_id, BusinessStatus.REJECTED, admin, {"reason": reason}
        )

    async def suspend(self, business_id: str, admin: str) -> Business:
        """Take an approved business off the public directory."""
        return await self._transition(business_id, BusinessStatus.SUSPENDED, admin)

    async def toggle_featured(self, business_id: str, admin: str) -> Business:
        business = await self.get(business_id)
        business.is_featured = not business.is_featured
        await resolve(self._repository.update(business))
        action = "featured" if business.is_featured else "unfeatured"
        self._emit(admin, f"business.{action}", business)
        return business

    async def toggle_verified(self, business_id: str, admin: str) -> Business:
        business = await self.get(business_id)
        business.is_verified = not business.is_verified
        business.verified_at = datetime.now(timezone.utc) if business.is_verified else None
        await resolve(self._repository.update(business))
        action = "verified" if business.is_verified else "unverified"
        self._emit(admin, f"business.{action}", business)
        return business

    async def dashboard(self) -> tuple[list[Business], DashboardStatistics]:
        """Pending businesses, newest first, plus counts per status."""
        pending = await resolve(self._repository.list_by_status(BusinessStatus.PENDING))
        pending.sort(key=lambda b: b.created_at, reverse=True)
        counts = await resolve(self._repository.count_by_status())
        statistics = DashboardStatistics(**counts, total=sum(counts.values()))
        return pending, statistics

    async def _transition(
        self,
        business_id: str,
        target: BusinessStatus,
        admin: str,
        details: dict[str, Any] | None = None,
    ) -> Business:
        business = await self.get(business_id)
        if target not in _ALLOWED[business.status]:
            raise InvalidTransitionError(
                f"Business {business_id} is '{business.status}', cannot become '{target}'."
            )
        previous = business.status
        business.status = target
        await resolve(self._repository.update(business))
        self._emit(admin, f"business.{target.value}", business, {
            "previous_status": previous.value,
            **(details or {}),
        })
        return business

    def _emit(
        self,
        admin: str,
        action: str,
        business: Business,
        details: dict[str, Any] | None = None,
    ) -> None:
        event = TelemetryEvent(
            actor=admin,
            action=action,
            resource=f"business:{business.id}",
            details={"business_name": business.business_name, **(details or {})},
        )
        try:
            self._telemetry.emit(event)
        except Exception:
            logger.warning("Telemetry sink failed for %s", action, exc_info=True)
