"""Built-in field validators for onboarding steps."""

from __future__ import annotations

import re
from typing import Any

# Registry of validator functions: name -> callable(value, **params) -> str | None
# Returns an error message string on failure, None on success.
VALIDATORS: dict[str, Any] = {}

_EMAIL_PATTERN = r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"
_URL_PATTERN = r"https?://[a-zA-Z0-9\-]+(\.[a-zA-Z0-9\-]+)*(:\d+)?(/[^\s]*)?"


def register(name: str):
    """Decorator to register a validator function."""
    def decorator(fn):
        VALIDATORS[name] = fn
        return fn
    return decorator


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@register("required")
def validate_required(value: Any, label: str = "value", **_kwargs: Any) -> str | None:
    if is_blank(value):
        return f"The {label} field is required."
    return None


@register("email")
def validate_email(value: Any, label: str = "value", **_kwargs: Any) -> str | None:
    if is_blank(value):
        return None
    if not isinstance(value, str) or not re.fullmatch(_EMAIL_PATTERN, value.strip()):
        return f"The {label} field must be a valid email address."
    return None


@register("url")
def validate_url(value: Any, label: str = "value", **_kwargs: Any) -> str | None:
    if is_blank(value):
        return None
    if not isinstance(value, str) or not re.fullmatch(_URL_PATTERN, value.strip()):
        return f"The {label} field must be a valid URL."
    return None


@register("max_length")
def validate_max_length(
    value: Any, label: str = "value", limit: int | str = 255, **_kwargs: Any
) -> str | None:
    if is_blank(value) or not isinstance(value, str):
        return None
    if len(value.strip()) > int(limit):
        return f"The {label} field must not be greater than {limit} characters."
    return None


@register("choice")
def validate_choice(
    value: Any, label: str = "value", options: list[str] | None = None, **_kwargs: Any
) -> str | None:
    if is_blank(value) or not options:
        return None
    if str(value).strip() not in options:
        return f"The selected {label} is invalid."
    return None
