"""add penalty cap fields

Revision ID: 8a4f0e2c6b91
Revises: 3c1e5b7a2d40
Create Date: 2025-09-20 14:31:52.730915

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8a4f0e2c6b91'
down_revision: Union[str, Sequence[str], None] = '3c1e5b7a2d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    existing_cols = {c["name"] for c in sa.inspect(bind).get_columns("quizaccess_duedate_instances")}

    if "penalty_cap_enabled" not in existing_cols:
        op.add_column(
            "quizaccess_duedate_instances",
            sa.Column("penalty_cap_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        )
    if "penalty_cap" not in existing_cols:
        op.add_column(
            "quizaccess_duedate_instances",
            sa.Column("penalty_cap", sa.Numeric(12, 2), nullable=False, server_default="0"),
        )


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("quizaccess_duedate_instances") as batch_op:
        batch_op.drop_column("penalty_cap")
        batch_op.drop_column("penalty_cap_enabled")
