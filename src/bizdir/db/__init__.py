"""Database layer for bizdir: async SQLAlchemy 2.0."""

from __future__ import annotations

from bizdir.db.base import Base
from bizdir.db.engine import DatabaseManager

__all__ = ["Base", "DatabaseManager"]
