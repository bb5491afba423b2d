"""favorites table

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None

json_type = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def upgrade() -> None:
    op.create_table(
        "favorites",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("owner_key", sa.String(length=128), nullable=False),
        sa.Column("item_id", sa.String(length=128), nullable=False),
        sa.Column("item_kind", sa.String(length=32), nullable=True),
        sa.Column("payload", json_type, nullable=True),
        sa.Column("schema_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_favorites"),
        sa.UniqueConstraint("owner_key", "item_id", name="uq_owner_favorite"),
    )
    op.create_index("ix_favorites_owner_key", "favorites", ["owner_key"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_favorites_owner_key", table_name="favorites")
    op.drop_table("favorites")
