"""Cookie-based session identification."""

from __future__ import annotations

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from bizdir.core.config import SessionConfig


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """Gives every visitor an opaque session id, carried in a cookie.

    The id is exposed as ``request.state.session_id``; the data itself
    lives in the server-side session store.
    """

    def __init__(self, app: ASGIApp, config: SessionConfig | None = None) -> None:
        super().__init__(app)
        self._config = config or SessionConfig()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        session_id = request.cookies.get(self._config.cookie_name)
        is_new = not session_id
        if is_new:
            session_id = uuid.uuid4().hex
        request.state.session_id = session_id

        response = await call_next(request)

        if is_new:
            response.set_cookie(
                self._config.cookie_name,
                session_id,
                max_age=self._config.cookie_max_age_seconds,
                httponly=True,
                samesite="lax",
            )
        return response
