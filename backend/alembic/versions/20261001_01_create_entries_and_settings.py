"""Create entries and settings tables.

Revision ID: 20261001_01
Revises:
Create Date: 2026-10-01 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261001_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("text", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "mood",
            sa.String(length=20),
            nullable=False,
            server_default=sa.text("'neutral'"),
        ),
        sa.Column(
            "sentiment",
            sa.String(length=20),
            nullable=False,
            server_default=sa.text("'neutral'"),
        ),
        sa.Column("sentiment_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("stress_level", sa.Integer(), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "is_quick_checkin",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )
    op.create_index("ix_entries_date", "entries", ["date"])
    op.create_index("ix_entries_mood", "entries", ["mood"])

    op.create_table(
        "settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("key", name="uq_settings_key"),
    )
    op.create_index("ix_settings_key", "settings", ["key"])


def downgrade() -> None:
    op.drop_index("ix_settings_key", table_name="settings")
    op.drop_table("settings")
    op.drop_index("ix_entries_mood", table_name="entries")
    op.drop_index("ix_entries_date", table_name="entries")
    op.drop_table("entries")
