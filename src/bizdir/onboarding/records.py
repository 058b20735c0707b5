"""Typed per-step records.

Raw form input is turned into one of these once it passes the step's
validation; everything after the registry boundary works with them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from bizdir.businesses.models import BusinessDetails


class StepRecord(BaseModel):
    """Base for the validated data of a single step."""

    model_config = {"extra": "forbid", "frozen": True}

    def as_session_data(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BusinessProfile(StepRecord):
    business_name: str
    industry: str
    business_type: str
    description: str
    tagline: str | None = None


class ContactDetails(StepRecord):
    primary_email: str
    phone_number: str
    website_url: str | None = None


class BusinessLocation(StepRecord):
    street_address: str
    city: str
    state_province: str
    postal_code: str
    country: str


class OwnerDetails(StepRecord):
    owner_name: str
    owner_email: str
    owner_phone: str | None = None


STEP_RECORDS: dict[str, type[StepRecord]] = {
    "business_profile": BusinessProfile,
    "contact_details": ContactDetails,
    "business_location": BusinessLocation,
    "owner_details": OwnerDetails,
}


class PendingRecord(BusinessDetails):
    """The merged data of every step, built only at submission time."""

    @classmethod
    def from_step_data(cls, step_data: dict[int, dict[str, Any]]) -> PendingRecord:
        merged: dict[str, Any] = {}
        for step in sorted(step_data):
            merged.update(step_data[step])
        return cls(**merged)
