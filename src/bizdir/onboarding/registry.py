"""Step schema registry.

Loads the onboarding steps from YAML and is the single place that knows
which fields each step owns and how they are validated.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import yaml

from bizdir.onboarding.errors import StepNotFoundError, StepSchemaError
from bizdir.onboarding.models import (
    FieldDefinition,
    FieldType,
    StepDefinition,
    ValidationResult,
)
from bizdir.onboarding.records import STEP_RECORDS, StepRecord
from bizdir.onboarding.validators import VALIDATORS, is_blank

_DEFAULT_STEPS_PATH = (
    Path(__file__).resolve().parents[3] / "config" / "onboarding" / "business.yml"
)

# Input types that imply a format rule even when the YAML does not list it.
_IMPLIED_VALIDATORS: dict[FieldType, str] = {
    FieldType.EMAIL: "email",
    FieldType.URL: "url",
    FieldType.SELECT: "choice",
}


def _parse_rule(rule: str) -> tuple[str, dict[str, Any]]:
    # "max_length:limit=255" -> ("max_length", {"limit": "255"})
    name, _, raw_params = rule.partition(":")
    params: dict[str, Any] = {}
    if raw_params:
        for pair in raw_params.split(","):
            key, _, value = pair.partition("=")
            params[key.strip()] = value.strip()
    return name.strip(), params


def _parse_field(data: dict[str, Any]) -> FieldDefinition:
    field_type = FieldType(data.get("type", "text"))
    validators = list(data.get("validators", []))
    implied = _IMPLIED_VALIDATORS.get(field_type)
    if implied and implied not in (_parse_rule(v)[0] for v in validators):
        validators.append(implied)
    return FieldDefinition(
        id=data["id"],
        label=data.get("label", data["id"].replace("_", " ")),
        field_type=field_type,
        required=data.get("required", False),
        validators=validators,
        options=data.get("options", []),
        placeholder=data.get("placeholder", ""),
        help_text=data.get("help_text", ""),
    )


def _parse_step(data: dict[str, Any]) -> StepDefinition:
    return StepDefinition(
        step_number=int(data["step"]),
        title=data.get("title", f"Step {data['step']}"),
        description=data.get("description", ""),
        record=data.get("record"),
        fields=[_parse_field(f) for f in data.get("fields", [])],
    )


class StepRegistry:
    """Static, validated set of wizard steps.

    Raises:
        StepSchemaError: If the steps are not numbered ``1..N`` without
            gaps, if a field belongs to more than one step, or if a step
            names an unknown validator or record type.
    """

    def __init__(self, steps_path: str | Path | None = None) -> None:
        path = Path(steps_path) if steps_path else _DEFAULT_STEPS_PATH
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        self._title: str = data.get("title", "")
        steps = [_parse_step(s) for s in data.get("steps", [])]
        self._check(steps)
        self._steps: dict[int, StepDefinition] = {s.step_number: s for s in steps}
        self._validators: dict[str, Callable[..., str | None]] = dict(VALIDATORS)

    @staticmethod
    def _check(steps: list[StepDefinition]) -> None:
        if not steps:
            raise StepSchemaError("The wizard must define at least one step.")

        numbers = sorted(s.step_number for s in steps)
        if numbers != list(range(1, len(steps) + 1)):
            raise StepSchemaError(f"Steps must be numbered 1..{len(steps)}, got {numbers}.")

        owner: dict[str, int] = {}
        for step in steps:
            for field in step.fields:
                if field.id in owner:
                    raise StepSchemaError(
                        f"Field {field.id!r} appears in steps "
                        f"{owner[field.id]} and {step.step_number}."
                    )
                owner[field.id] = step.step_number
                for rule in field.validators:
                    name, _ = _parse_rule(rule)
                    if name not in VALIDATORS:
                        raise StepSchemaError(
                            f"Unknown validator {name!r} on field {field.id!r}."
                        )

            if step.record is not None and step.record not in STEP_RECORDS:
                raise StepSchemaError(
                    f"Unknown record type {step.record!r} for step {step.step_number}."
                )

    @property
    def title(self) -> str:
        return self._title

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> list[StepDefinition]:
        return [self._steps[n] for n in sorted(self._steps)]

    def has_step(self, step: int) -> bool:
        return step in self._steps

    def get_step(self, step: int) -> StepDefinition:
        """Return the definition of ``step``.

        Raises:
            StepNotFoundError: If ``step`` is outside ``1..total_steps``.
        """
        if not self.has_step(step):
            raise StepNotFoundError(step, self.total_steps)
        return self._steps[step]

    def validate_field(self, field: FieldDefinition, value: Any) -> list[str]:
        """Validate one value against a field. Returns error messages."""
        if is_blank(value):
            if field.required:
                return [self._validators["required"](value, label=field.label)]
            return []

        errors: list[str] = []
        for rule in field.validators:
            name, params = _parse_rule(rule)
            if name == "required":
                continue
            if name == "choice":
                params.setdefault("options", field.options)
            err = self._validators[name](value, label=field.label, **params)
            if err:
                errors.append(err)
        return errors

    def validate(self, step: int, submitted: dict[str, Any]) -> ValidationResult:
        """Validate a step submission, reporting every invalid field at once."""
        definition = self.get_step(step)
        errors: dict[str, list[str]] = {}
        cleaned: dict[str, str] = {}

        for field in definition.fields:
            value = submitted.get(field.id)
            field_errors = self.validate_field(field, value)
            if field_errors:
                errors[field.id] = field_errors
            elif not is_blank(value):
                cleaned[field.id] = str(value).strip()

        if errors:
            return ValidationResult(valid=False, errors=errors)
        return ValidationResult(valid=True, cleaned=cleaned)

    def record_type(self, step: int) -> type[StepRecord] | None:
        record = self.get_step(step).record
        return STEP_RECORDS[record] if record else None

    def parse_record(self, step: int, cleaned: dict[str, str]) -> StepRecord | dict[str, str]:
        """Turn cleaned step data into the step's typed record, if it has one."""
        record_type = self.record_type(step)
        if record_type is None:
            return dict(cleaned)
        return record_type(**cleaned)

    def field_hints(self, step: int) -> list[dict[str, Any]]:
        """Client-facing field metadata derived from the same definitions."""
        hints = []
        for field in self.get_step(step).fields:
            hints.append({
                "id": field.id,
                "label": field.label,
                "type": field.field_type.value,
                "required": field.required,
                "max_length": field.max_length,
                "options": list(field.options),
                "placeholder": field.placeholder,
                "help_text": field.help_text,
            })
        return hints
