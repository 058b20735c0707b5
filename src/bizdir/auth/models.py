"""Authentication data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from bizdir.core.types import Role


class AuthCredentials(BaseModel):
    username: str
    password: str


class AuthResult(BaseModel):
    success: bool
    token: str | None = None
    role: Role = Role.VISITOR
    user_id: str | None = None
    display_name: str = ""
    error: str | None = None


class TokenValidation(BaseModel):
    valid: bool
    user_id: str | None = None
    role: Role = Role.VISITOR
    expires_at: datetime | None = None
