"""Tests for the public directory endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bizdir.core.types import BusinessStatus
from bizdir.web.app import create_app

from conftest import make_business


@pytest.fixture
def app():
    app = create_app()
    store = app.state.business_repository
    store.insert(make_business(
        "Sunrise Bakery", status=BusinessStatus.APPROVED, industry="Food", city="Tucson",
    ))
    store.insert(make_business(
        "Acme Corp", status=BusinessStatus.APPROVED, industry="Technology", is_featured=True,
    ))
    store.insert(make_business("Hidden Shop", industry="Food"))
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_list_approved_only(client):
    body = client.get("/businesses").json()
    assert body["count"] == 2
    names = [b["business_name"] for b in body["businesses"]]
    assert names[0] == "Acme Corp"
    assert "Hidden Shop" not in names
    assert body["industries"] == ["Food", "Technology"]


def test_search(client):
    body = client.get("/businesses", params={"search": "tucson"}).json()
    assert [b["business_name"] for b in body["businesses"]] == ["Sunrise Bakery"]
    assert body["search"] == "tucson"


def test_industry_filter(client):
    body = client.get("/businesses", params={"industry": "Food"}).json()
    assert [b["business_name"] for b in body["businesses"]] == ["Sunrise Bakery"]


def test_listing_hides_owner_details(client):
    for business in client.get("/businesses").json()["businesses"]:
        assert "owner_email" not in business
        assert "owner_name" not in business


def test_detail(client):
    response = client.get("/businesses/sunrise-bakery")
    assert response.status_code == 200
    body = response.json()
    assert body["business_name"] == "Sunrise Bakery"
    assert "owner_phone" not in body


@pytest.mark.parametrize("slug", ["hidden-shop", "missing"])
def test_detail_404(client, slug):
    assert client.get(f"/businesses/{slug}").status_code == 404
