"""Timed store operations compared by the demo.

Each operation returns a result dictionary:
    {
        "status": "success" | "failed",
        "count": int,
        "elapsed_ms": float,
        "errors": list[str]
    }
"""

import logging
from collections.abc import Sequence
from decimal import Decimal
from time import perf_counter
from typing import Any

from tradeingest.database.errors import PersistenceError
from tradeingest.models.trade import Trade
from tradeingest.store import Store

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = Decimal("0")  # stocks purchased above $0/share (all)
STOCK_NAME_PREFIX = "NYSE-"


def _elapsed_ms(start: float) -> float:
    return (perf_counter() - start) * 1000


def store_trades(store: Store, trades: Sequence[Trade]) -> dict[str, Any]:
    """Store trades through the bulk write fast path.

    Only the write itself is timed.

    Raises:
        PersistenceError: If the write fails
    """
    start = perf_counter()
    store.bulk_write(trades)
    elapsed_ms = _elapsed_ms(start)

    logger.info(f"Bulk write stored {len(trades)} trade(s) in {elapsed_ms:.1f}ms")
    return {
        "status": "success",
        "count": len(trades),
        "elapsed_ms": elapsed_ms,
        "errors": [],
    }


def view_all(
    store: Store,
    threshold: Decimal = DEFAULT_THRESHOLD,
    prefix: str = STOCK_NAME_PREFIX,
) -> dict[str, Any]:
    """Iterate every trade above ``threshold`` and rewrite its stock name.

    ``prefix`` is prepended to each visited row, which is written back
    through the cursor. Timing covers execute through the end of the loop;
    the cursor is closed after the timer stops.

    Raises:
        PersistenceError: If the query or an update fails
    """
    query = store.create_query(threshold)
    try:
        start = perf_counter()
        query.execute()

        count = 0
        for trade in query:
            trade.stock_name = prefix + trade.stock_name
            query.set(trade)
            count += 1
            logger.debug(f"Rewrote {trade}")

        elapsed_ms = _elapsed_ms(start)
    finally:
        query.close()

    logger.info(f"Query rewrote {count} trade(s) in {elapsed_ms:.1f}ms")
    return {
        "status": "success",
        "count": count,
        "elapsed_ms": elapsed_ms,
        "errors": [],
    }


def store_using_batch(store: Store, trades: Sequence[Trade]) -> dict[str, Any]:
    """Store trades through a positional INSERT batch statement.

    Binding and batch execution are timed; preparing and closing the
    statement are not. Failures are reported in the result, never raised.
    """
    try:
        statement = store.prepare_insert()
        try:
            start = perf_counter()
            for trade in trades:
                statement.add_batch(trade)
            statement.execute_batch()
            elapsed_ms = _elapsed_ms(start)
        finally:
            statement.close()
    except PersistenceError as e:
        error_msg = f"There was a problem storing items using the batch statement: {e}"
        logger.error(error_msg)
        return {
            "status": "failed",
            "count": 0,
            "elapsed_ms": 0.0,
            "errors": [error_msg],
        }

    logger.info(f"Batch statement stored {len(trades)} trade(s) in {elapsed_ms:.1f}ms")
    return {
        "status": "success",
        "count": len(trades),
        "elapsed_ms": elapsed_ms,
        "errors": [],
    }
