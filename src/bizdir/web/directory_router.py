"""FastAPI router for the public business directory."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from bizdir.businesses.errors import BusinessNotFoundError
from bizdir.businesses.models import Business

router = APIRouter()

# Owner contact details are for admins only.
_PRIVATE_FIELDS = {"owner_name", "owner_email", "owner_phone"}


class DirectoryResponse(BaseModel):
    businesses: list[dict[str, Any]]
    count: int
    search: str | None = None
    industry: str | None = None
    industries: list[str]


def public_view(business: Business) -> dict[str, Any]:
    return business.model_dump(mode="json", exclude=_PRIVATE_FIELDS)


@router.get("/businesses")
async def list_businesses(
    request: Request, search: str | None = None, industry: str | None = None
) -> DirectoryResponse:
    directory = request.app.state.directory_service
    businesses = await directory.search(query=search, industry=industry)
    return DirectoryResponse(
        businesses=[public_view(b) for b in businesses],
        count=len(businesses),
        search=search,
        industry=industry,
        industries=await directory.industries(),
    )


@router.get("/businesses/{slug}")
async def show_business(slug: str, request: Request) -> dict[str, Any]:
    directory = request.app.state.directory_service
    try:
        business = await directory.find_public(slug)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])
    return public_view(business)
