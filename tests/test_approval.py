"""Tests for admin review of businesses."""

from __future__ import annotations

import pytest

from bizdir.businesses.approval import BusinessApprovalService
from bizdir.businesses.errors import BusinessNotFoundError, InvalidTransitionError
from bizdir.core.types import BusinessStatus

from conftest import make_business


@pytest.fixture
def service(business_store, telemetry):
    return BusinessApprovalService(business_store, telemetry)


def _add(store, name="Acme Corp", status=BusinessStatus.PENDING, **kw):
    business = make_business(name, status=status, **kw)
    store.insert(business)
    return business


class TestTransitions:
    async def test_approve_pending(self, service, business_store, telemetry):
        business = _add(business_store)
        approved = await service.approve(business.id, "admin")

        assert approved.status == BusinessStatus.APPROVED
        assert business_store.get(business.id).status == BusinessStatus.APPROVED
        event = telemetry.find("business.approved")[0]
        assert event.actor == "admin"
        assert event.resource == f"business:{business.id}"
        assert event.details["previous_status"] == "pending"

    async def test_reject_with_reason(self, service, business_store, telemetry):
        business = _add(business_store)
        rejected = await service.reject(business.id, "admin", reason="Duplicate listing")
        assert rejected.status == BusinessStatus.REJECTED
        assert telemetry.find("business.rejected")[0].details["reason"] == "Duplicate listing"

    async def test_suspend_approved(self, service, business_store):
        business = _add(business_store, status=BusinessStatus.APPROVED)
        suspended = await service.suspend(business.id, "admin")
        assert suspended.status == BusinessStatus.SUSPENDED

    @pytest.mark.parametrize("status,action", [
        (BusinessStatus.APPROVED, "approve"),
        (BusinessStatus.REJECTED, "approve"),
        (BusinessStatus.SUSPENDED, "approve"),
        (BusinessStatus.APPROVED, "reject"),
        (BusinessStatus.PENDING, "suspend"),
        (BusinessStatus.REJECTED, "suspend"),
    ])
    async def test_refused_transitions(self, service, business_store, status, action):
        business = _add(business_store, status=status)
        with pytest.raises(InvalidTransitionError):
            await getattr(service, action)(business.id, "admin")
        assert business_store.get(business.id).status == status

    async def test_unknown_business(self, service):
        with pytest.raises(BusinessNotFoundError):
            await service.approve("missing", "admin")
        with pytest.raises(BusinessNotFoundError):
            await service.get("missing")


class TestFlags:
    async def test_toggle_featured(self, service, business_store, telemetry):
        business = _add(business_store, status=BusinessStatus.APPROVED)

        assert (await service.toggle_featured(business.id, "admin")).is_featured
        assert business_store.get(business.id).is_featured
        assert not (await service.toggle_featured(business.id, "admin")).is_featured
        assert telemetry.actions() == ["business.featured", "business.unfeatured"]

    async def test_toggle_verified_sets_timestamp(self, service, business_store):
        business = _add(business_store)

        verified = await service.toggle_verified(business.id, "admin")
        assert verified.is_verified
        assert verified.verified_at is not None

        unverified = await service.toggle_verified(business.id, "admin")
        assert not unverified.is_verified
        assert unverified.verified_at is None

    async def test_flags_do_not_change_status(self, service, business_store):
        business = _add(business_store)
        await service.toggle_featured(business.id, "admin")
        await service.toggle_verified(business.id, "admin")
        assert business_store.get(business.id).status == BusinessStatus.PENDING


class ExplodingSink:
    def emit(self, event):
        raise OSError("audit disk full")


class TestTelemetryFailures:
    async def test_failing_sink_does_not_undo_approval(self, business_store):
        service = BusinessApprovalService(business_store, ExplodingSink())
        business = _add(business_store)

        approved = await service.approve(business.id, "admin")

        assert approved.status == BusinessStatus.APPROVED
        assert business_store.get(business.id).status == BusinessStatus.APPROVED

    async def test_failing_sink_on_toggles(self, business_store, caplog):
        service = BusinessApprovalService(business_store, ExplodingSink())
        business = _add(business_store, status=BusinessStatus.APPROVED)

        assert (await service.toggle_featured(business.id, "admin")).is_featured
        assert (await service.toggle_verified(business.id, "admin")).is_verified
        assert "Telemetry sink failed for business.featured" in caplog.text


class TestDashboard:
    async def test_pending_and_statistics(self, service, business_store):
        old = _add(business_store, "Old Shop")
        new = _add(business_store, "New Shop")
        new_stored = business_store.get(new.id)
        business_store.update(new_stored.model_copy(
            update={"created_at": old.created_at.replace(year=old.created_at.year + 1)}
        ))
        _add(business_store, "Live Shop", status=BusinessStatus.APPROVED)
        _add(business_store, "Gone Shop", status=BusinessStatus.REJECTED)

        pending, stats = await service.dashboard()

        assert [b.business_name for b in pending] == ["New Shop", "Old Shop"]
        assert stats.pending == 2
        assert stats.approved == 1
        assert stats.rejected == 1
        assert stats.suspended == 0
        assert stats.total == 4

    async def test_empty(self, service):
        pending, stats = await service.dashboard()
        assert pending == []
        assert stats.total == 0
