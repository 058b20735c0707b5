"""Tests for application assembly and configuration."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bizdir.businesses.store import BusinessStore
from bizdir.core.config import DatabaseConfig, OnboardingConfig, Settings, TelemetryConfig
from bizdir.repositories.sql.businesses import SqlBusinessRepository
from bizdir.telemetry import AuditTrailSink, LoggingTelemetrySink, NullTelemetrySink
from bizdir.web.app import build_telemetry, create_app


def test_health():
    response = TestClient(create_app()).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "bizdir"


def test_defaults_to_in_memory_store():
    app = create_app(Settings(db=DatabaseConfig(url=None)))
    assert isinstance(app.state.business_repository, BusinessStore)
    assert not hasattr(app.state, "db_manager")


def test_database_url_uses_sql_repository():
    app = create_app(Settings(db=DatabaseConfig(url="sqlite+aiosqlite:///:memory:")))
    assert isinstance(app.state.business_repository, SqlBusinessRepository)
    assert app.state.db_manager is not None


def test_slug_attempts_from_config():
    app = create_app(Settings(onboarding=OnboardingConfig(slug_max_attempts=7)))
    assert app.state.wizard_controller._materializer._max_attempts == 7


def test_custom_steps_file(tmp_path):
    path = tmp_path / "steps.yml"
    path.write_text(
        "steps:\n"
        "  - step: 1\n"
        "    title: Only Step\n"
        "    fields:\n"
        "      - id: business_name\n"
        "        required: true\n"
    )
    app = create_app(Settings(onboarding=OnboardingConfig(steps_path=str(path))))
    assert app.state.step_registry.total_steps == 1
    body = TestClient(app).get("/onboard/step/1").json()
    assert body["title"] == "Only Step"


@pytest.mark.parametrize("sink,expected", [
    ("null", NullTelemetrySink),
    ("logging", LoggingTelemetrySink),
])
def test_build_telemetry(sink, expected):
    assert isinstance(build_telemetry(TelemetryConfig(sink=sink)), expected)


def test_build_audit_telemetry(tmp_path):
    sink = build_telemetry(TelemetryConfig(sink="audit", log_dir=str(tmp_path)))
    assert isinstance(sink, AuditTrailSink)
    assert sink.path.parent == tmp_path


def test_unknown_sink():
    with pytest.raises(ValueError, match="Unknown telemetry sink"):
        build_telemetry(TelemetryConfig(sink="kafka"))


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("BIZDIR_ONBOARDING_SLUG_MAX_ATTEMPTS", "12")
    monkeypatch.setenv("BIZDIR_SESSION_COOKIE_NAME", "sid")
    settings = Settings()
    assert settings.onboarding.slug_max_attempts == 12
    assert settings.session.cookie_name == "sid"


def test_cookie_name_from_settings():
    from bizdir.core.config import SessionConfig

    client = TestClient(create_app(Settings(session=SessionConfig(cookie_name="sid"))))
    client.get("/onboard/step/1")
    assert client.cookies.get("sid")
