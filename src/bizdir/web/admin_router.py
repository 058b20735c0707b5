"""FastAPI router for admin login and business review."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from bizdir.auth.middleware import require_admin
from bizdir.auth.models import AuthCredentials
from bizdir.businesses.errors import BusinessNotFoundError, InvalidTransitionError
from bizdir.businesses.models import DashboardStatistics

router = APIRouter()


class AuthLoginRequest(BaseModel):
    username: str
    password: str


class AuthTokenRequest(BaseModel):
    token: str


class RejectRequest(BaseModel):
    reason: str | None = None


class DashboardResponse(BaseModel):
    pending: list[dict[str, Any]]
    statistics: DashboardStatistics


# --- Auth endpoints ---


@router.post("/api/auth/login")
async def auth_login(body: AuthLoginRequest, request: Request) -> dict[str, Any]:
    provider = getattr(request.app.state, "auth_provider", None)
    if provider is None:
        raise HTTPException(status_code=503, detail="Auth provider not available")

    result = provider.authenticate(
        AuthCredentials(username=body.username, password=body.password)
    )
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error)
    return result.model_dump(mode="json")


@router.post("/api/auth/logout")
async def auth_logout(body: AuthTokenRequest, request: Request) -> dict[str, Any]:
    provider = getattr(request.app.state, "auth_provider", None)
    if provider is None:
        raise HTTPException(status_code=503, detail="Auth provider not available")
    return {"revoked": provider.revoke_token(body.token)}


# --- Admin endpoints ---


@router.get("/admin/dashboard")
async def dashboard(request: Request, admin: str = require_admin()) -> DashboardResponse:
    service = request.app.state.approval_service
    pending, statistics = await service.dashboard()
    return DashboardResponse(
        pending=[b.model_dump(mode="json") for b in pending],
        statistics=statistics,
    )


@router.get("/admin/businesses/{business_id}")
async def show_business(
    business_id: str, request: Request, admin: str = require_admin()
) -> dict[str, Any]:
    service = request.app.state.approval_service
    try:
        business = await service.get(business_id)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])
    return business.model_dump(mode="json")


async def _apply(request: Request, business_id: str, action: str, *args: Any) -> dict[str, Any]:
    service = request.app.state.approval_service
    try:
        business = await getattr(service, action)(business_id, *args)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return business.model_dump(mode="json")


@router.post("/admin/businesses/{business_id}/approve")
async def approve(
    business_id: str, request: Request, admin: str = require_admin()
) -> dict[str, Any]:
    return await _apply(request, business_id, "approve", admin)


@router.post("/admin/businesses/{business_id}/reject")
async def reject(
    business_id: str,
    request: Request,
    body: RejectRequest | None = None,
    admin: str = require_admin(),
) -> dict[str, Any]:
    reason = body.reason if body else None
    return await _apply(request, business_id, "reject", admin, reason)


@router.post("/admin/businesses/{business_id}/suspend")
async def suspend(
    business_id: str, request: Request, admin: str = require_admin()
) -> dict[str, Any]:
    return await _apply(request, business_id, "suspend", admin)


@router.post("/admin/businesses/{business_id}/feature")
async def toggle_featured(
    business_id: str, request: Request, admin: str = require_admin()
) -> dict[str, Any]:
    return await _apply(request, business_id, "toggle_featured", admin)


@router.post("/admin/businesses/{business_id}/verify")
async def toggle_verified(
    business_id: str, request: Request, admin: str = require_admin()
) -> dict[str, Any]:
    return await _apply(request, business_id, "toggle_verified", admin)
