"""create_presentation_tables

Revision ID: 7f3a1c2e9b10
Revises:
Create Date: 2025-10-06 00:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7f3a1c2e9b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "presentation_sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("start_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "duration_per_slot",
            sa.Integer(),
            nullable=False,
            comment="Minutes allotted to each presenting group",
        ),
        sa.Column("end_datetime", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.CheckConstraint(
            "duration_per_slot > 0 AND duration_per_slot <= 1440",
            name=op.f("ck_presentation_sessions_duration_in_range"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_presentation_sessions")),
    )

    op.create_table(
        "presentation_slots",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, comment="1-based, dense per session"),
        sa.Column(
            "scheduled_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="start_datetime + (position - 1) * duration_per_slot",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["presentation_sessions.id"],
            name=op.f("fk_presentation_slots_session_id_presentation_sessions"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_presentation_slots")),
        sa.UniqueConstraint("session_id", "position", name="uq_presentation_slots_session_position"),
        sa.UniqueConstraint("session_id", "group_id", name="uq_presentation_slots_session_group"),
    )
    op.create_index("ix_presentation_slots_session_id", "presentation_slots", ["session_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_presentation_slots_session_id", table_name="presentation_slots")
    op.drop_table("presentation_slots")
    op.drop_table("presentation_sessions")
