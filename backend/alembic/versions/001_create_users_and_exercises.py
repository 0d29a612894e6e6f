"""Create users and exercises tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates `users` and their owned `exercises`.
How:   exercises.user_id references users.id with ON DELETE CASCADE;
       (user_id, position) is unique and gives insertion order.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column(
            "name",
            sa.Text(),
            nullable=False,
            comment="Username; the lookup key for idempotent creation",
        ),
        sa.Column(
            "count",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of exercises logged for this user",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_users_name", "users", ["name"], unique=True)
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "exercises",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "position",
            sa.Integer(),
            nullable=False,
            comment="Insertion order within the owning user (0-based)",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_exercises_user_position",
        "exercises",
        ["user_id", "position"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_exercises_user_position", table_name="exercises")
    op.drop_table("exercises")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_index("uq_users_name", table_name="users")
    op.drop_table("users")
