"""Create the developer_tokens table.

Revision ID: 20261017_create_developer_tokens
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261017_create_developer_tokens"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Store one token per username."""

    op.create_table(
        "developer_tokens",
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("username", name=op.f("pk_developer_tokens")),
    )


def downgrade() -> None:
    op.drop_table("developer_tokens")
