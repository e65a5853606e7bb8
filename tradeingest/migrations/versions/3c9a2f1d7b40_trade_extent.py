"""Trade extent

Revision ID: 3c9a2f1d7b40
Revises:
Create Date: 2026-10-19 09:14:02.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c9a2f1d7b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Import the flat trade schema."""
    op.create_table(
        "trade",
        sa.Column(
            "id", sa.Integer(), nullable=False, primary_key=True, autoincrement=True
        ),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("purchase_price", sa.BigInteger(), nullable=False),
        sa.Column("stock_name", sa.Text(), nullable=False),
    )
    op.create_index(
        "ix_trade_stock_name_purchase_date",
        "trade",
        ["stock_name", "purchase_date"],
    )


def downgrade() -> None:
    """Drop the trade extent and all of its rows."""
    op.drop_index("ix_trade_stock_name_purchase_date", table_name="trade")
    op.drop_table("trade")
