"""add version column to core_store

Revision ID: 002
Revises: 001
Create Date: 2026-09-20

The setup flag is now claimed with compare-and-set, which needs a
per-row version counter.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "core_store",
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )


def downgrade() -> None:
    op.drop_column("core_store", "version")
