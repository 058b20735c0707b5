"""Exceptions raised by the onboarding wizard.

Ordering violations and validation failures are not exceptions; the
controller returns them as values.
"""

from __future__ import annotations


class StepNotFoundError(KeyError):
    """The requested step number is outside the wizard's range."""

    def __init__(self, step: int, total_steps: int) -> None:
        super().__init__(f"Step {step} does not exist (wizard has {total_steps} steps)")
        self.step = step
        self.total_steps = total_steps


class StepSchemaError(ValueError):
    """The step schema file is malformed or breaks a registry invariant."""
