"""Tests for SqlBusinessRepository against in-memory SQLite."""

from __future__ import annotations

import pytest

from bizdir.businesses.approval import BusinessApprovalService
from bizdir.businesses.directory import DirectoryService
from bizdir.businesses.errors import PersistenceError, SlugConflictError
from bizdir.businesses.materializer import RecordMaterializer
from bizdir.core.types import BusinessStatus
from bizdir.db.engine import DatabaseManager
from bizdir.onboarding.records import PendingRecord
from bizdir.repositories.sql.businesses import SqlBusinessRepository

from conftest import completed_session, make_business


@pytest.fixture
async def repo():
    db = DatabaseManager("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield SqlBusinessRepository(db)
    await db.close()


async def test_insert_and_get(repo):
    business = make_business()
    await repo.insert(business)

    loaded = await repo.get(business.id)
    assert loaded is not None
    assert loaded.business_name == "Acme Corp"
    assert loaded.status == BusinessStatus.PENDING
    assert loaded.owner_email == "wile@acme.example.com"


async def test_get_missing(repo):
    assert await repo.get("nope") is None
    assert await repo.get_by_slug("nope") is None


async def test_slug_lookup(repo):
    business = make_business()
    await repo.insert(business)
    assert await repo.slug_exists("acme-corp")
    assert not await repo.slug_exists("acme-corp-2")
    assert (await repo.get_by_slug("acme-corp")).id == business.id


async def test_duplicate_slug_raises_conflict(repo):
    await repo.insert(make_business())
    with pytest.raises(SlugConflictError):
        await repo.insert(make_business())
    assert len(await repo.list_all()) == 1


async def test_other_constraint_fault_is_persistence_error(repo):
    business = make_business()
    await repo.insert(business)
    same_id = business.model_copy(update={"business_slug": "acme-corp-2"})

    with pytest.raises(PersistenceError):
        await repo.insert(same_id)
    assert not await repo.slug_exists("acme-corp-2")


async def test_materializer_stops_on_non_slug_fault(repo):
    taken = make_business(business_slug="placeholder")
    await repo.insert(taken)

    class SameIdRepository:
        def __init__(self, inner):
            self.inner = inner
            self.inserts = 0

        async def slug_exists(self, slug):
            return await self.inner.slug_exists(slug)

        async def insert(self, business):
            self.inserts += 1
            await self.inner.insert(business.model_copy(update={"id": taken.id}))

    wrapped = SameIdRepository(repo)
    with pytest.raises(PersistenceError) as excinfo:
        await RecordMaterializer(wrapped).materialize(
            PendingRecord.from_step_data(completed_session(4).step_data)
        )
    assert wrapped.inserts == 1
    assert "No free slug" not in str(excinfo.value)


async def test_update(repo):
    business = make_business()
    await repo.insert(business)
    business.status = BusinessStatus.APPROVED
    business.is_featured = True
    await repo.update(business)

    loaded = await repo.get(business.id)
    assert loaded.status == BusinessStatus.APPROVED
    assert loaded.is_featured


async def test_update_missing(repo):
    with pytest.raises(KeyError):
        await repo.update(make_business())


async def test_list_and_count_by_status(repo):
    await repo.insert(make_business("A"))
    await repo.insert(make_business("B", status=BusinessStatus.APPROVED))
    await repo.insert(make_business("C", status=BusinessStatus.APPROVED))

    approved = await repo.list_by_status(BusinessStatus.APPROVED)
    assert sorted(b.business_name for b in approved) == ["B", "C"]
    counts = await repo.count_by_status()
    assert counts == {"pending": 1, "approved": 2, "rejected": 0, "suspended": 0}


async def test_materializer_with_sql(repo):
    materializer = RecordMaterializer(repo)
    pending = PendingRecord.from_step_data(completed_session(4).step_data)

    first = await materializer.materialize(pending)
    second = await materializer.materialize(pending)

    assert first.business_slug == "acme-corp"
    assert second.business_slug == "acme-corp-2"


async def test_approval_and_directory_with_sql(repo):
    business = make_business()
    await repo.insert(business)

    await BusinessApprovalService(repo).approve(business.id, "admin")
    results = await DirectoryService(repo).search("acme")

    assert [b.id for b in results] == [business.id]
