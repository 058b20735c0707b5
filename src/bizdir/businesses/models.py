"""Business records for the directory."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from bizdir.core.types import BusinessStatus


class BusinessDetails(BaseModel):
    """Everything a business owner supplies through onboarding."""

    business_name: str
    industry: str
    business_type: str
    description: str
    tagline: str | None = None

    primary_email: str
    phone_number: str
    website_url: str | None = None

    street_address: str
    city: str
    state_province: str
    postal_code: str
    country: str

    owner_name: str
    owner_email: str
    owner_phone: str | None = None


class Business(BusinessDetails):
    """A persisted directory entry."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    business_slug: str
    status: BusinessStatus = BusinessStatus.PENDING
    is_featured: bool = False
    is_verified: bool = False
    verified_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_public(self) -> bool:
        return self.status == BusinessStatus.APPROVED


class DashboardStatistics(BaseModel):
    """Counts shown on the admin dashboard."""

    pending: int = 0
    approved: int = 0
    rejected: int = 0
    suspended: int = 0
    total: int = 0
