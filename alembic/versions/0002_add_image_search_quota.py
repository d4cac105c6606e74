"""Add hourly image search counters to users.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.add_column(
            sa.Column("image_search_count", sa.Integer(), nullable=False, server_default="0")
        )
        batch_op.add_column(sa.Column("image_search_window", sa.DateTime(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_column("image_search_window")
        batch_op.drop_column("image_search_count")
