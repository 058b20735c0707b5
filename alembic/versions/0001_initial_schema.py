"""Initial schema: the businesses table.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("business_slug", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("tagline", sa.String(255), nullable=True),
        sa.Column("industry", sa.String(255), nullable=False),
        sa.Column("business_type", sa.String(64), nullable=False),
        sa.Column("primary_email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(255), nullable=False),
        sa.Column("website_url", sa.String(255), nullable=True),
        sa.Column("street_address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(255), nullable=False),
        sa.Column("state_province", sa.String(255), nullable=False),
        sa.Column("postal_code", sa.String(255), nullable=False),
        sa.Column("country", sa.String(255), nullable=False),
        sa.Column("owner_name", sa.String(255), nullable=False),
        sa.Column("owner_email", sa.String(255), nullable=False),
        sa.Column("owner_phone", sa.String(255), nullable=True),
        sa.Column("status", sa.String(32), server_default="pending"),
        sa.Column("is_verified", sa.Boolean, server_default="false"),
        sa.Column("is_featured", sa.Boolean, server_default="false"),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_businesses_status_verified", "businesses", ["status", "is_verified"]
    )
    op.create_index("ix_businesses_industry", "businesses", ["industry"])
    op.create_index("ix_businesses_city_state", "businesses", ["city", "state_province"])


def downgrade() -> None:
    op.drop_index("ix_businesses_city_state", table_name="businesses")
    op.drop_index("ix_businesses_industry", table_name="businesses")
    op.drop_index("ix_businesses_status_verified", table_name="businesses")
    op.drop_table("businesses")
