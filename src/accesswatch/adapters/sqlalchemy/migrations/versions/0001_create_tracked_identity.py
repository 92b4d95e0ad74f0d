"""Create the tracked_identity table.

Revision ID: 0001_create_tracked_identity
Revises:
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_tracked_identity"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tracked_identity",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("chat_id", sa.String(), nullable=False),
        sa.Column("external_id", sa.Integer(), nullable=False),
        sa.Column("natural_key", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("alias", sa.String(length=100), nullable=True),
        sa.Column("last_entry_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_exit_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "chat_id",
            "natural_key",
            name="uq_tracked_identity_chat_id_natural_key",
        ),
    )
    op.create_index("ix_tracked_identity_external_id", "tracked_identity", ["external_id"])


def downgrade() -> None:
    op.drop_index("ix_tracked_identity_external_id", table_name="tracked_identity")
    op.drop_table("tracked_identity")
