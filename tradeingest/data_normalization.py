"""Data normalization layer.

Converts Trade records to and from the row format stored in the trade extent.
Prices are stored as fixed-point integers (micro-dollars).
"""

from datetime import date
from decimal import Decimal
from typing import Any

from tradeingest.models.trade import Trade

# Precision constants for currency conversion
MICRO_DOLLARS = 1_000_000  # 6 decimal places for subpenny precision
CENTS = Decimal("0.01")


def price_to_int(amount: Decimal) -> int:
    """Convert Decimal price to fixed-point integer (micro-dollars).

    Args:
        amount: Decimal amount to convert

    Returns:
        Integer amount in micro-dollars
    """
    return int(Decimal(amount) * MICRO_DOLLARS)


def int_to_price(value: int) -> Decimal:
    """Convert a micro-dollar integer back to a Decimal price.

    Whole-cent prices come back with two decimal places; sub-cent prices
    keep every stored digit so a rewrite never changes them.
    """
    price = Decimal(value).scaleb(-6)
    cents = price.quantize(CENTS)
    return cents if cents == price else price.normalize()


def parse_date(value: Any) -> date:
    """Accept a date or an ISO-8601 string (as written by the batch statement)."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def trade_to_row(trade: Trade) -> dict[str, Any]:
    """Normalize a Trade to the column mapping used by the fast path.

    Example:
        Trade(date(2016, 8, 12), Decimal("150.25"), "AAPL")
        -> {
            "purchase_date": date(2016, 8, 12),
            "purchase_price": 150250000,  # micro-dollars
            "stock_name": "AAPL",
        }
    """
    return {
        "purchase_date": trade.purchase_date,
        "purchase_price": price_to_int(trade.purchase_price),
        "stock_name": trade.stock_name,
    }


def trade_to_params(trade: Trade) -> tuple[str, int, str]:
    """Positional parameters for the batch statement.

    The date is bound as ISO text so every DB-API driver accepts it.
    """
    return (
        trade.purchase_date.isoformat(),
        price_to_int(trade.purchase_price),
        trade.stock_name,
    )


def row_to_trade(row: Any) -> Trade:
    """Rebuild a Trade from a result row (mapping-like or attribute access)."""
    mapping = row._mapping if hasattr(row, "_mapping") else row
    return Trade(
        purchase_date=parse_date(mapping["purchase_date"]),
        purchase_price=int_to_price(mapping["purchase_price"]),
        stock_name=mapping["stock_name"],
    )
