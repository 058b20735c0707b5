"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from bizdir.businesses.materializer import RecordMaterializer
from bizdir.businesses.models import Business
from bizdir.businesses.store import BusinessStore
from bizdir.core.types import BusinessStatus, Role
from bizdir.onboarding.controller import WizardController
from bizdir.onboarding.models import WizardSession
from bizdir.onboarding.registry import StepRegistry
from bizdir.telemetry.sink import RecordingTelemetrySink

ADMIN_TOKEN = "test-admin-token-for-tests"


def step1_data(**overrides: Any) -> dict[str, str]:
    return {
        "business_name": "Acme Corp",
        "industry": "Technology",
        "business_type": "LLC",
        "description": "We build anvils and rocket skates.",
        "tagline": "Quality since 1949",
        **overrides,
    }


def step2_data(**overrides: Any) -> dict[str, str]:
    return {
        "primary_email": "hello@acme.example.com",
        "phone_number": "555-123-4567",
        "website_url": "https://acme.example.com",
        **overrides,
    }


def step3_data(**overrides: Any) -> dict[str, str]:
    return {
        "street_address": "1 Desert Road",
        "city": "Phoenix",
        "state_province": "Arizona",
        "postal_code": "85001",
        "country": "United States",
        **overrides,
    }


def step4_data(**overrides: Any) -> dict[str, str]:
    return {
        "owner_name": "Wile E. Coyote",
        "owner_email": "wile@acme.example.com",
        **overrides,
    }


ALL_STEPS = {1: step1_data, 2: step2_data, 3: step3_data, 4: step4_data}


def completed_session(upto: int = 4, session_id: str = "sess-1") -> WizardSession:
    """A session with valid data for steps 1..upto."""
    return WizardSession(
        session_id=session_id,
        step_data={n: ALL_STEPS[n]() for n in range(1, upto + 1)},
        progress=round(100 * upto / 4),
    )


def make_business(
    name: str = "Acme Corp",
    status: BusinessStatus = BusinessStatus.PENDING,
    **overrides: Any,
) -> Business:
    fields = {
        **step1_data(business_name=name),
        **step2_data(),
        **step3_data(),
        **step4_data(),
    }
    fields.update(overrides)
    slug = fields.pop("business_slug", name.lower().replace(" ", "-"))
    return Business(**fields, business_slug=slug, status=status)


def install_admin_token(app) -> str:
    """Register an admin token on the app's auth provider.

    Returns the token string for use in Authorization headers.
    """
    provider = app.state.auth_provider
    provider._tokens[ADMIN_TOKEN] = {
        "user_id": "test-admin",
        "role": Role.ADMIN,
        "display_name": "Test Admin",
        "expires_at": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return ADMIN_TOKEN


@pytest.fixture
def registry() -> StepRegistry:
    return StepRegistry()


@pytest.fixture
def business_store() -> BusinessStore:
    return BusinessStore()


@pytest.fixture
def telemetry() -> RecordingTelemetrySink:
    return RecordingTelemetrySink()


@pytest.fixture
def materializer(business_store) -> RecordMaterializer:
    return RecordMaterializer(business_store)


@pytest.fixture
def controller(registry, materializer, telemetry) -> WizardController:
    return WizardController(registry=registry, materializer=materializer, telemetry=telemetry)
