"""Create question table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "003"
down_revision: str | None = "002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "question",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.String(length=300), nullable=False),
        sa.Column("subject_id", sa.Integer(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["subject_id"], ["category.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_question_subject_id"), "question", ["subject_id"], unique=False)
    op.create_index(op.f("ix_question_user_id"), "question", ["user_id"], unique=False)
    op.create_index(op.f("ix_question_created_at"), "question", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_question_created_at"), table_name="question")
    op.drop_index(op.f("ix_question_user_id"), table_name="question")
    op.drop_index(op.f("ix_question_subject_id"), table_name="question")
    op.drop_table("question")
