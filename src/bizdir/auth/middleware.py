"""Authentication middleware and dependencies."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from bizdir.core.types import Role


class AuthMiddleware(BaseHTTPMiddleware):
    """Extracts a Bearer token and sets request.state.role / auth_user_id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.role = Role.VISITOR
        request.state.auth_user_id = None

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
            provider = getattr(request.app.state, "auth_provider", None)
            if provider is not None:
                validation = provider.validate_token(token)
                if validation.valid:
                    request.state.role = validation.role
                    request.state.auth_user_id = validation.user_id

        return await call_next(request)


def require_admin():
    """FastAPI dependency returning the admin's user id, or 403."""

    def dependency(request: Request) -> str:
        role = getattr(request.state, "role", Role.VISITOR)
        if role != Role.ADMIN:
            raise HTTPException(status_code=403, detail="Admin access required")
        return request.state.auth_user_id

    return Depends(dependency)
