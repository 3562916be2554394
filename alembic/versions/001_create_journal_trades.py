"""Create journal_trades table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "journal_trades",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("symbol", sa.String(20), nullable=False),
        sa.Column("trade_date", sa.Date(), nullable=False),
        sa.Column("trade_time", sa.Time(), nullable=False),
        sa.Column("trade_type", sa.String(5), nullable=False),
        sa.Column("session", sa.String(10), nullable=False),
        sa.Column("entry_price", sa.Float(), nullable=False),
        sa.Column("exit_price", sa.Float(), nullable=False),
        sa.Column("stop_loss", sa.Float(), nullable=False),
        sa.Column("take_profit", sa.Float(), nullable=False),
        sa.Column("size", sa.Float(), nullable=False),
        sa.Column("emotions", sa.Text(), nullable=True),
        sa.Column("strategy", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("pre_trade_analysis", sa.Text(), nullable=True),
        sa.Column("post_trade_analysis", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("trade_type IN ('Long', 'Short')", name="ck_journal_trades_trade_type"),
        sa.CheckConstraint("size > 0", name="ck_journal_trades_size_positive"),
    )
    op.create_index("ix_journal_trades_position", "journal_trades", ["position"])


def downgrade() -> None:
    op.drop_index("ix_journal_trades_position", table_name="journal_trades")
    op.drop_table("journal_trades")
