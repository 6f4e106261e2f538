"""Create users and winners tables

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

Users hold the live state of the current round (score, coins_total,
last_update_at); winners is the append-only round history.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables with their ranking indexes."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("wallet", sa.String(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("coins_total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("last_update_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("score >= 0", name="ck_users_score_non_negative"),
        sa.CheckConstraint("coins_total >= 0", name="ck_users_coins_non_negative"),
    )
    op.create_index("ix_users_score", "users", ["score"])
    op.create_index("ix_users_coins_total", "users", ["coins_total"])

    op.create_table(
        "winners",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("round_number", sa.Integer(), nullable=False, unique=True),
        sa.Column("round_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("top_scores", sa.JSON(), nullable=False),
        sa.Column("top_coins", sa.JSON(), nullable=False),
    )
    op.create_index("ix_winners_round_end", "winners", ["round_end"])


def downgrade() -> None:
    """Drop both tables."""
    op.drop_index("ix_winners_round_end", "winners")
    op.drop_table("winners")
    op.drop_index("ix_users_coins_total", "users")
    op.drop_index("ix_users_score", "users")
    op.drop_table("users")
