"""Tests for the session store and the wizard's session-key contract."""

from __future__ import annotations

from bizdir.onboarding.models import WizardSession
from bizdir.onboarding.session import (
    PROGRESS_KEY,
    SessionStore,
    clear_wizard_session,
    load_wizard_session,
    save_wizard_session,
    step_key,
    wizard_keys,
)

from conftest import step1_data, step2_data


class TestSessionStore:
    def test_put_and_get(self):
        store = SessionStore()
        store.put("s1", "colour", "orange")
        assert store.get("s1", "colour") == "orange"
        assert store.has("s1", "colour")

    def test_sessions_are_isolated(self):
        store = SessionStore()
        store.put("s1", "colour", "orange")
        assert store.get("s2", "colour") is None
        assert not store.has("s2", "colour")

    def test_default(self):
        assert SessionStore().get("s1", "missing", 42) == 42

    def test_values_are_copied(self):
        store = SessionStore()
        data = {"a": "1"}
        store.put("s1", "k", data)
        data["a"] = "changed"
        fetched = store.get("s1", "k")
        fetched["a"] = "also changed"
        assert store.get("s1", "k") == {"a": "1"}

    def test_pull_removes(self):
        store = SessionStore()
        store.put("s1", "notice", "hi")
        assert store.pull("s1", "notice") == "hi"
        assert store.pull("s1", "notice") is None

    def test_forget_unknown_session_is_noop(self):
        SessionStore().forget("nobody", "k")

    def test_flush(self):
        store = SessionStore()
        store.put("s1", "k", "v")
        store.flush("s1")
        assert store.all("s1") == {}


class TestWizardKeys:
    def test_key_names(self):
        assert step_key(3) == "onboarding_step_3"
        assert PROGRESS_KEY == "onboarding_progress"
        assert wizard_keys(2) == [
            "onboarding_step_1", "onboarding_step_2", "onboarding_progress",
        ]

    def test_load_empty(self):
        session = load_wizard_session(SessionStore(), "s1", 4)
        assert session.session_id == "s1"
        assert session.step_data == {}
        assert session.progress == 0

    def test_save_then_load(self):
        store = SessionStore()
        session = WizardSession(step_data={1: step1_data(), 2: step2_data()}, progress=50)
        save_wizard_session(store, "s1", session, 4)

        assert store.get("s1", "onboarding_step_1") == step1_data()
        assert store.get("s1", "onboarding_step_2") == step2_data()
        assert store.get("s1", "onboarding_progress") == 50

        loaded = load_wizard_session(store, "s1", 4)
        assert loaded.step_data == session.step_data
        assert loaded.progress == 50

    def test_save_removes_dropped_steps(self):
        store = SessionStore()
        save_wizard_session(store, "s1", WizardSession(step_data={1: step1_data()}, progress=25), 4)
        save_wizard_session(store, "s1", WizardSession(), 4)
        assert not store.has("s1", "onboarding_step_1")
        assert not store.has("s1", "onboarding_progress")

    def test_clear_leaves_other_keys(self):
        store = SessionStore()
        store.put("s1", "locale", "en")
        save_wizard_session(store, "s1", WizardSession(step_data={1: step1_data()}, progress=25), 4)

        clear_wizard_session(store, "s1", 4)

        assert store.all("s1") == {"locale": "en"}
