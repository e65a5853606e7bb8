"""Table definition for the trade extent."""

import sqlalchemy as sa

EXTENT_NAME = "trade"

metadata = sa.MetaData()

trade_table = sa.Table(
    EXTENT_NAME,
    metadata,
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("purchase_date", sa.Date(), nullable=False),
    sa.Column("purchase_price", sa.BigInteger(), nullable=False),  # micro-dollars
    sa.Column("stock_name", sa.Text(), nullable=False),
    sa.Index("ix_trade_stock_name_purchase_date", "stock_name", "purchase_date"),
)
