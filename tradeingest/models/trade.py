"""Trade model class

This model represents a single flat Trade record stored in the trade extent.

Attributes:
- purchase_date: The calendar date of the purchase
- purchase_price: The price paid per share (Decimal, two decimal places)
- stock_name: The ticker the trade was made in
"""

import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

MIN_PRICE = Decimal("1.00")
MAX_PRICE = Decimal("1000.00")

FIRST_PURCHASE_DATE = date(2010, 1, 1)
LAST_PURCHASE_DATE = date(2019, 12, 31)

STOCK_NAMES = (
    "AAPL",
    "AMZN",
    "BAC",
    "CSCO",
    "GE",
    "GOOG",
    "IBM",
    "INTC",
    "JPM",
    "KO",
    "MSFT",
    "NKE",
    "ORCL",
    "PFE",
    "T",
    "XOM",
)


@dataclass
class Trade:
    purchase_date: date
    purchase_price: Decimal
    stock_name: str

    def __repr__(self):
        return (
            f"Trade(stock_name={self.stock_name}, "
            f"purchase_price={self.purchase_price}, "
            f"purchase_date={self.purchase_date.isoformat()})"
        )


def generate_sample_data(count: int, rng: random.Random | None = None) -> list[Trade]:
    """Generate random sample trades.

    Args:
        count: Number of trades to generate
        rng: Optional random generator (for reproducible output)

    Returns:
        List of exactly ``count`` Trade instances

    Raises:
        ValueError: If count is negative
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    rng = rng or random.Random()
    low_cents = int(MIN_PRICE * 100)
    high_cents = int(MAX_PRICE * 100)
    span_days = (LAST_PURCHASE_DATE - FIRST_PURCHASE_DATE).days

    trades = []
    for _ in range(count):
        trades.append(
            Trade(
                purchase_date=FIRST_PURCHASE_DATE
                + timedelta(days=rng.randint(0, span_days)),
                purchase_price=Decimal(rng.randint(low_cents, high_cents)).scaleb(-2),
                stock_name=rng.choice(STOCK_NAMES),
            )
        )
    return trades
