"""create cached tasks table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_create_cached_tasks"
down_revision = "0001_create_overlays"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "cached_tasks",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("list_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=True),
        sa.Column("url", sa.Text(), nullable=False, server_default=""),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("custom_item_id", sa.BigInteger(), nullable=True),
        sa.Column("custom_id", sa.String(length=100), nullable=True),
        sa.Column("parent_id", sa.String(length=64), nullable=True),
        sa.Column("assignee_ids", sa.JSON(), nullable=False),
    )
    op.create_index("ix_cached_tasks_position", "cached_tasks", ["position"], unique=False)
    op.create_index("ix_cached_tasks_parent_id", "cached_tasks", ["parent_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_cached_tasks_parent_id", table_name="cached_tasks")
    op.drop_index("ix_cached_tasks_position", table_name="cached_tasks")
    op.drop_table("cached_tasks")
