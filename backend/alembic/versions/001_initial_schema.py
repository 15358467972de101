"""Initial schema — solves, custom_events.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "solves",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.String(80), nullable=False),
        sa.Column("scramble_id", sa.Uuid, nullable=False, unique=True),
        sa.Column("scramble", sa.Text, nullable=False),
        sa.Column("elapsed_ms", sa.Integer, nullable=False),
        sa.Column("penalty", sa.String(8), nullable=False, server_default="none"),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("elapsed_ms >= 0", name="ck_solves_elapsed_non_negative"),
    )
    op.create_index("ix_solves_event_id", "solves", ["event_id"])

    op.create_table(
        "custom_events",
        sa.Column("id", sa.String(80), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("moves", sa.JSON, nullable=False),
        sa.Column("scramble_length", sa.Integer, nullable=False),
        sa.Column("inspection_ms", sa.Integer, nullable=False),
        sa.Column("hold_threshold_ms", sa.Integer, nullable=False),
        sa.Column("inspection_policy", sa.String(10), nullable=False, server_default="none"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("custom_events")
    op.drop_index("ix_solves_event_id", table_name="solves")
    op.drop_table("solves")
