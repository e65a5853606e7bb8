"""Forward-only query cursor with in-place update of the current row."""

import logging
from collections.abc import Iterator
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.engine import Connection, Transaction

from tradeingest.data_normalization import price_to_int, row_to_trade, trade_to_row
from tradeingest.database.errors import PersistenceError, translate_errors
from tradeingest.database.schema import trade_table
from tradeingest.models.trade import Trade

logger = logging.getLogger(__name__)


class TradeQuery:
    """Query over trades priced above a threshold.

    Rows are ordered by stock name, then purchase date, and are materialized
    when ``execute()`` runs. ``set()`` rewrites the row the cursor is on.
    Updates share one transaction which is committed by ``close()``.

    Usage:
        query = session.create_query(Decimal("0"))
        query.execute()
        for trade in query:
            trade.stock_name = "NYSE-" + trade.stock_name
            query.set(trade)
        query.close()
    """

    def __init__(self, connection: Connection, threshold: Decimal, on_close=None):
        self._connection = connection
        self.threshold = threshold
        self._on_close = on_close
        self._transaction: Transaction | None = None
        self._rows: Iterator | None = None
        self._current_id: int | None = None
        self.closed = False

        self.statement = (
            select(trade_table)
            .where(trade_table.c.purchase_price > price_to_int(threshold))
            .order_by(trade_table.c.stock_name, trade_table.c.purchase_date)
        )

    def execute(self) -> None:
        """Run the query and position the cursor before the first row.

        Raises:
            PersistenceError: If the query is closed, already executed, or fails
        """
        if self.closed:
            raise PersistenceError("Query is closed")
        if self._rows is not None:
            raise PersistenceError("Query has already been executed")

        with translate_errors("Query execution"):
            self._transaction = self._connection.begin()
            try:
                rows = self._connection.execute(self.statement).all()
            except Exception:
                self._transaction.rollback()
                self._transaction = None
                raise

        logger.debug(f"Query matched {len(rows)} trade(s)")
        self._rows = iter(rows)

    def __iter__(self) -> Iterator[Trade]:
        if self._rows is None:
            raise PersistenceError("Query must be executed before iterating")

        for row in self._rows:
            self._current_id = row.id
            yield row_to_trade(row)
        self._current_id = None

    def set(self, trade: Trade) -> None:
        """Write ``trade`` over the row at the current cursor position.

        Raises:
            PersistenceError: If the cursor is not on a row or the update fails
        """
        if self._current_id is None:
            raise PersistenceError("Cursor is not positioned on a row")

        with translate_errors("Cursor update"):
            self._connection.execute(
                update(trade_table)
                .where(trade_table.c.id == self._current_id)
                .values(**trade_to_row(trade))
            )

    def close(self) -> None:
        """Commit pending updates and release the cursor. Safe to call twice."""
        if self.closed:
            return
        self.closed = True
        self._rows = None
        self._current_id = None

        try:
            if self._transaction is not None and self._transaction.is_active:
                with translate_errors("Cursor close"):
                    self._transaction.commit()
        finally:
            self._transaction = None
            if self._on_close is not None:
                self._on_close(self)
