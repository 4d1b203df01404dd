"""add due date overrides and quiz_id on penalties

Revision ID: d27b9c4e1f05
Revises: 8a4f0e2c6b91
Create Date: 2026-02-09 21:17:40.402618

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'd27b9c4e1f05'
down_revision: Union[str, Sequence[str], None] = '8a4f0e2c6b91'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table("quizaccess_duedate_penalties", recreate="always") as batch_op:
        batch_op.add_column(sa.Column("quiz_id", sa.Integer(), nullable=False, server_default="0"))
        batch_op.create_index("ix_quizaccess_duedate_penalties_quiz_id", ["quiz_id"])

    op.create_table(
        "quizaccess_duedate_overrides",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quiz_id", sa.Integer(), sa.ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=True),
        sa.Column("due_date", sa.Integer(), nullable=False),
        sa.Column("last_modified", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("quiz_id", "user_id", name="uq_duedate_override_quiz_user"),
        sa.UniqueConstraint("quiz_id", "group_id", name="uq_duedate_override_quiz_group"),
        sa.CheckConstraint(
            "(user_id IS NULL) <> (group_id IS NULL)",
            name="ck_duedate_override_single_scope",
        ),
    )
    op.create_index("ix_quizaccess_duedate_overrides_quiz_id", "quizaccess_duedate_overrides", ["quiz_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_quizaccess_duedate_overrides_quiz_id", table_name="quizaccess_duedate_overrides")
    op.drop_table("quizaccess_duedate_overrides")

    with op.batch_alter_table("quizaccess_duedate_penalties", recreate="always") as batch_op:
        batch_op.drop_index("ix_quizaccess_duedate_penalties_quiz_id")
        batch_op.drop_column("quiz_id")
