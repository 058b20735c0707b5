"""FastAPI application for the local business directory.

Wires the onboarding wizard, the public directory and the admin review
endpoints onto one app.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from bizdir import __version__
from bizdir.auth.middleware import AuthMiddleware
from bizdir.auth.provider import FixtureAuthProvider
from bizdir.businesses.approval import BusinessApprovalService
from bizdir.businesses.directory import DirectoryService
from bizdir.businesses.materializer import RecordMaterializer
from bizdir.businesses.store import BusinessStore
from bizdir.core.config import Settings, TelemetryConfig
from bizdir.db.engine import DatabaseManager
from bizdir.onboarding.controller import WizardController
from bizdir.onboarding.registry import StepRegistry
from bizdir.onboarding.session import SessionStore
from bizdir.repositories.protocols import BusinessRepository
from bizdir.repositories.sql.businesses import SqlBusinessRepository
from bizdir.telemetry import (
    AuditTrailSink,
    LoggingTelemetrySink,
    NullTelemetrySink,
    TelemetrySink,
)
from bizdir.web.admin_router import router as admin_router
from bizdir.web.directory_router import router as directory_router
from bizdir.web.onboarding_router import router as onboarding_router
from bizdir.web.session import SessionCookieMiddleware


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__


def build_telemetry(config: TelemetryConfig) -> TelemetrySink:
    """Pick the telemetry sink named in config."""
    if config.sink == "audit":
        return AuditTrailSink(config=config)
    if config.sink == "null":
        return NullTelemetrySink()
    if config.sink == "logging":
        return LoggingTelemetrySink()
    raise ValueError(f"Unknown telemetry sink: {config.sink!r}")


def create_app(
    settings: Settings | None = None,
    telemetry: TelemetrySink | None = None,
    business_repository: BusinessRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with their own stores and sinks.

    Args:
        settings: Application settings. Defaults to Settings().
        telemetry: Optional telemetry sink; otherwise built from settings.
        business_repository: Optional business storage. Without one, a SQL
            repository is used when ``settings.db.url`` is set and an
            in-memory store otherwise.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("bizdir").setLevel(settings.log_level.upper())

    if telemetry is None:
        telemetry = build_telemetry(settings.telemetry)

    db_manager: DatabaseManager | None = None
    if business_repository is None:
        if settings.db.url:
            db_manager = DatabaseManager.from_config(settings.db)
            business_repository = SqlBusinessRepository(db_manager)
        else:
            business_repository = BusinessStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if db_manager is not None:
            await db_manager.close()

    app = FastAPI(
        title="Local Business Directory",
        description="Business onboarding, public directory and admin review",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Dependencies
    registry = StepRegistry(settings.onboarding.steps_path)
    materializer = RecordMaterializer(
        business_repository, max_attempts=settings.onboarding.slug_max_attempts
    )
    wizard_controller = WizardController(
        registry=registry,
        materializer=materializer,
        telemetry=telemetry,
    )
    auth_provider = FixtureAuthProvider(
        fixtures_path=settings.auth.fixtures_path,
        token_expiry_minutes=settings.auth.token_expiry_minutes,
    )

    app.state.settings = settings
    app.state.telemetry = telemetry
    app.state.business_repository = business_repository
    app.state.session_store = SessionStore()
    app.state.step_registry = registry
    app.state.wizard_controller = wizard_controller
    app.state.approval_service = BusinessApprovalService(business_repository, telemetry)
    app.state.directory_service = DirectoryService(business_repository)
    app.state.auth_provider = auth_provider
    if db_manager is not None:
        app.state.db_manager = db_manager

    app.add_middleware(AuthMiddleware)
    app.add_middleware(SessionCookieMiddleware, config=settings.session)

    app.include_router(onboarding_router)
    app.include_router(directory_router)
    app.include_router(admin_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="bizdir")

    return app
