"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class OnboardingConfig(BaseSettings):
    """Onboarding wizard configuration."""

    model_config = {"env_prefix": "BIZDIR_ONBOARDING_"}

    steps_path: str | None = None
    slug_max_attempts: int = 1000


class TelemetryConfig(BaseSettings):
    """Telemetry sink configuration."""

    model_config = {"env_prefix": "BIZDIR_TELEMETRY_"}

    sink: str = "logging"
    log_dir: str = "data/telemetry"
    log_file: str = "events.jsonl"


class DatabaseConfig(BaseSettings):
    """Database configuration. Without a URL the in-memory stores are used."""

    model_config = {"env_prefix": "BIZDIR_DB_"}

    url: str | None = None
    echo: bool = False
    pool_size: int = 5


class AuthConfig(BaseSettings):
    """Admin authentication configuration."""

    model_config = {"env_prefix": "BIZDIR_AUTH_"}

    fixtures_path: str | None = None
    token_expiry_minutes: int = 60


class SessionConfig(BaseSettings):
    """Browser session configuration."""

    model_config = {"env_prefix": "BIZDIR_SESSION_"}

    cookie_name: str = "bizdir_session"
    cookie_max_age_seconds: int = 60 * 60 * 24


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "BIZDIR_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    onboarding: OnboardingConfig = Field(default_factory=OnboardingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
