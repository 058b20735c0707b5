"""Authentication provider Protocol and fixture-backed implementation."""

from __future__ import annotations

import hmac
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from bizdir.auth.models import AuthCredentials, AuthResult, TokenValidation
from bizdir.core.types import Role

_DEFAULT_FIXTURES_PATH = Path(__file__).resolve().parents[3] / "config" / "admin_fixtures.yml"


@runtime_checkable
class AuthProvider(Protocol):
    """Protocol for authentication providers."""

    def authenticate(self, credentials: AuthCredentials) -> AuthResult: ...

    def validate_token(self, token: str) -> TokenValidation: ...

    def revoke_token(self, token: str) -> bool: ...


class FixtureAuthProvider:
    """Admin accounts read from YAML, bearer tokens kept in memory."""

    def __init__(
        self,
        fixtures_path: str | Path | None = None,
        token_expiry_minutes: int = 60,
    ) -> None:
        self._users: dict[str, dict[str, Any]] = {}
        self._tokens: dict[str, dict[str, Any]] = {}
        self._token_expiry = timedelta(minutes=token_expiry_minutes)
        self._load_fixtures(Path(fixtures_path) if fixtures_path else _DEFAULT_FIXTURES_PATH)

    def _load_fixtures(self, path: Path) -> None:
        if not path.exists():
            return
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        for user in data.get("users", []):
            self._users[user["username"]] = user

    @property
    def users(self) -> dict[str, dict[str, Any]]:
        return dict(self._users)

    def issue_token(self, user_id: str, role: Role, display_name: str = "") -> str:
        token = str(uuid.uuid4())
        self._tokens[token] = {
            "user_id": user_id,
            "role": role,
            "display_name": display_name or user_id,
            "expires_at": datetime.now(timezone.utc) + self._token_expiry,
        }
        return token

    def authenticate(self, credentials: AuthCredentials) -> AuthResult:
        user = self._users.get(credentials.username)
        if user is None or not hmac.compare_digest(
            str(user.get("password", "")), credentials.password
        ):
            return AuthResult(success=False, error="Invalid credentials")

        role = Role(user.get("role", "admin"))
        display_name = user.get("display_name", user["username"])
        token = self.issue_token(user["username"], role, display_name)
        return AuthResult(
            success=True,
            token=token,
            role=role,
            user_id=user["username"],
            display_name=display_name,
        )

    def validate_token(self, token: str) -> TokenValidation:
        info = self._tokens.get(token)
        if info is None:
            return TokenValidation(valid=False)

        if datetime.now(timezone.utc) > info["expires_at"]:
            del self._tokens[token]
            return TokenValidation(valid=False)

        return TokenValidation(
            valid=True,
            user_id=info["user_id"],
            role=info["role"],
            expires_at=info["expires_at"],
        )

    def revoke_token(self, token: str) -> bool:
        return self._tokens.pop(token, None) is not None
