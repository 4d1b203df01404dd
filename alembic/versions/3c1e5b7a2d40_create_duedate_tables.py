"""create due date settings and penalty tables

Revision ID: 3c1e5b7a2d40
Revises:
Create Date: 2025-09-11 10:02:14.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1e5b7a2d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "quizaccess_duedate_instances",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quiz_id", sa.Integer(), sa.ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("due_date", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("penalty_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("penalty_rate", sa.Numeric(12, 2), nullable=False, server_default="0"),
    )
    op.create_index(
        "ix_quizaccess_duedate_instances_quiz_id",
        "quizaccess_duedate_instances",
        ["quiz_id"],
        unique=True,
    )

    op.create_table(
        "quizaccess_duedate_penalties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("attempt_id", sa.Integer(), sa.ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("penalty_applied", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("last_modified", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("attempt_id", name="uq_duedate_penalties_attempt"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("quizaccess_duedate_penalties")
    op.drop_index("ix_quizaccess_duedate_instances_quiz_id", table_name="quizaccess_duedate_instances")
    op.drop_table("quizaccess_duedate_instances")
