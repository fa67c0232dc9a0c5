"""Create user table

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("username_key", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="student"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("credential_account", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("external_identity_id", sa.String(length=256), nullable=True),
        sa.Column("gender", sa.String(length=16), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("bio", sa.String(length=150), nullable=True),
        sa.Column("avatar", sa.String(length=512), nullable=False),
        sa.Column("class_grade", sa.String(length=64), nullable=True),
        sa.Column("school_name", sa.String(length=256), nullable=True),
        sa.Column("notify_new_answers", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("notify_upvotes", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("notify_badges", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("badges_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("badge_levels", sa.JSON(), nullable=False),
        sa.Column("badge_progress", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_identity_id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)
    op.create_index(op.f("ix_user_username_key"), "user", ["username_key"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_username_key"), table_name="user")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
