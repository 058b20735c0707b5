"""Session storage and the wizard's session-key contract.

The wizard keeps its state in the visitor's session under two kinds of
key: ``onboarding_step_{n}`` holds the validated data of step ``n`` and
``onboarding_progress`` holds the completion percentage. No other key is
read, written or cleared by the wizard.
"""

from __future__ import annotations

import copy
from typing import Any

from bizdir.onboarding.models import WizardSession

PROGRESS_KEY = "onboarding_progress"

_MISSING = object()


def step_key(step: int) -> str:
    return f"onboarding_step_{step}"


def wizard_keys(total_steps: int) -> list[str]:
    return [step_key(n) for n in range(1, total_steps + 1)] + [PROGRESS_KEY]


class SessionStore:
    """In-memory key-value store scoped by opaque session id.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store. Suitable for single-instance
    deployment; expiry is left to the cookie lifetime.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, dict[str, Any]] = {}

    def get(self, session_id: str, key: str, default: Any = None) -> Any:
        value = self._sessions.get(session_id, {}).get(key, _MISSING)
        if value is _MISSING:
            return default
        return copy.deepcopy(value)

    def put(self, session_id: str, key: str, value: Any) -> None:
        self._sessions.setdefault(session_id, {})[key] = copy.deepcopy(value)

    def has(self, session_id: str, key: str) -> bool:
        return key in self._sessions.get(session_id, {})

    def forget(self, session_id: str, *keys: str) -> None:
        data = self._sessions.get(session_id)
        if data is None:
            return
        for key in keys:
            data.pop(key, None)

    def pull(self, session_id: str, key: str, default: Any = None) -> Any:
        """Read a value and remove it (flash messages)."""
        value = self.get(session_id, key, default)
        self.forget(session_id, key)
        return value

    def all(self, session_id: str) -> dict[str, Any]:
        return copy.deepcopy(self._sessions.get(session_id, {}))

    def flush(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


def load_wizard_session(
    store: SessionStore, session_id: str, total_steps: int
) -> WizardSession:
    """Build the WizardSession for ``session_id`` from its session keys."""
    step_data: dict[int, dict[str, Any]] = {}
    for step in range(1, total_steps + 1):
        data = store.get(session_id, step_key(step))
        if data is not None:
            step_data[step] = data
    return WizardSession(
        session_id=session_id,
        step_data=step_data,
        progress=int(store.get(session_id, PROGRESS_KEY, 0)),
    )


def save_wizard_session(
    store: SessionStore, session_id: str, session: WizardSession, total_steps: int
) -> None:
    """Write ``session`` back, removing step keys it no longer holds."""
    for step in range(1, total_steps + 1):
        if step in session.step_data:
            store.put(session_id, step_key(step), session.step_data[step])
        else:
            store.forget(session_id, step_key(step))
    if session.is_empty:
        store.forget(session_id, PROGRESS_KEY)
    else:
        store.put(session_id, PROGRESS_KEY, session.progress)


def clear_wizard_session(store: SessionStore, session_id: str, total_steps: int) -> None:
    store.forget(session_id, *wizard_keys(total_steps))
