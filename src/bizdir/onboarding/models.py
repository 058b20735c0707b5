"""Shared models for the onboarding wizard."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FieldType(str, Enum):
    """Input types a step field can declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    URL = "url"
    TEL = "tel"
    SELECT = "select"


class FieldDefinition(BaseModel):
    """Definition of a single form field within a step."""

    id: str
    label: str
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    validators: list[str] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    placeholder: str = ""
    help_text: str = ""

    @property
    def max_length(self) -> int | None:
        for rule in self.validators:
            name, _, params = rule.partition(":")
            if name == "max_length":
                for pair in params.split(","):
                    key, _, value = pair.partition("=")
                    if key.strip() == "limit":
                        return int(value)
        return None


class StepDefinition(BaseModel):
    """Static definition of one wizard step."""

    model_config = {"frozen": True}

    step_number: int
    title: str
    description: str = ""
    record: str | None = None
    fields: list[FieldDefinition] = Field(default_factory=list)

    @property
    def required_fields(self) -> frozenset[str]:
        return frozenset(f.id for f in self.fields if f.required)

    @property
    def optional_fields(self) -> frozenset[str]:
        return frozenset(f.id for f in self.fields if not f.required)

    @property
    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    @property
    def validators(self) -> dict[str, list[str]]:
        return {f.id: list(f.validators) for f in self.fields}


class ValidationResult(BaseModel):
    """Result of validating a step submission.

    ``cleaned`` holds the accepted values (stripped, optional blanks
    dropped, unknown keys ignored) and is only meaningful when ``valid``.
    """

    valid: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    cleaned: dict[str, str] = Field(default_factory=dict)


class WizardSession(BaseModel):
    """Onboarding state of one browsing session.

    Which steps have entries in ``step_data`` is the whole state; there is
    no separate cursor.
    """

    session_id: str | None = None
    step_data: dict[int, dict[str, Any]] = Field(default_factory=dict)
    progress: int = 0

    def has_step(self, step: int) -> bool:
        return step in self.step_data

    def lowest_missing(self, upto: int) -> int | None:
        """Lowest step in ``1..upto`` without data, or None."""
        for step in range(1, upto + 1):
            if not self.has_step(step):
                return step
        return None

    @property
    def highest_completed(self) -> int:
        """Highest step reachable without gaps from step 1."""
        step = 0
        while step + 1 in self.step_data:
            step += 1
        return step

    @property
    def is_empty(self) -> bool:
        return not self.step_data and self.progress == 0


# --- Controller results ---


class RedirectError(BaseModel):
    """Returned (never raised) when a step is visited out of order.

    The caller should send the visitor to ``target`` and show ``notice``.
    """

    target: int
    notice: str


class StepView(BaseModel):
    """What to render for a step: its definition pre-filled with saved data."""

    step: StepDefinition
    data: dict[str, Any] = Field(default_factory=dict)
    progress: int = 0
    total_steps: int
    fields: list[dict[str, Any]] = Field(default_factory=list)


class NextStepTransition(BaseModel):
    """Successful step submission; where the visitor goes next."""

    completed_step: int
    next_step: int | None = None
    to_review: bool = False
    progress: int


class ValidationFailure(BaseModel):
    """Rejected step submission; the step is re-rendered with these."""

    step: int
    errors: dict[str, list[str]]
    submitted: dict[str, Any] = Field(default_factory=dict)


class ReviewView(BaseModel):
    """Read-only summary of every completed step before submission."""

    steps: dict[int, dict[str, Any]]
    titles: dict[int, str] = Field(default_factory=dict)
    record: dict[str, Any]
    progress: int


class SubmittedConfirmation(BaseModel):
    """The business created by a successful final submission."""

    business_id: str
    business_slug: str
    status: str
