"""Exceptions raised by the business persistence and approval layers."""

from __future__ import annotations


class PersistenceError(Exception):
    """A storage fault while writing a business. Callers may retry."""


class SlugConflictError(Exception):
    """An insert collided with an existing ``business_slug``."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug {slug!r} is already taken")
        self.slug = slug


class BusinessNotFoundError(KeyError):
    """No business matches the given id or slug."""


class InvalidTransitionError(ValueError):
    """A status change that the current status does not allow."""
