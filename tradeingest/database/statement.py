"""Positional-parameter batch statement executed at DB-API driver level."""

import logging

from sqlalchemy.engine import Connection

from tradeingest.data_normalization import trade_to_params
from tradeingest.database.errors import PersistenceError, translate_errors
from tradeingest.database.schema import EXTENT_NAME
from tradeingest.models.trade import Trade

logger = logging.getLogger(__name__)

INSERT_COLUMNS = ("purchase_date", "purchase_price", "stock_name")

# DB-API paramstyle -> positional placeholder for parameter n (1-based)
_POSITIONAL_PLACEHOLDERS = {
    "qmark": lambda n: "?",
    "format": lambda n: "%s",
    "pyformat": lambda n: "%s",
    "numeric": lambda n: f":{n}",
}


def render_insert(paramstyle: str) -> str:
    """Render the trade INSERT with positional placeholders for ``paramstyle``.

    Raises:
        PersistenceError: If the driver does not support positional parameters
    """
    try:
        placeholder = _POSITIONAL_PLACEHOLDERS[paramstyle]
    except KeyError:
        raise PersistenceError(
            f"Driver paramstyle {paramstyle!r} has no positional placeholders"
        ) from None

    placeholders = ", ".join(placeholder(n) for n in range(1, len(INSERT_COLUMNS) + 1))
    return (
        f"INSERT INTO {EXTENT_NAME} ({', '.join(INSERT_COLUMNS)}) "
        f"VALUES ({placeholders})"
    )


class BatchStatement:
    """Prepared INSERT that accumulates bound rows and executes them at once.

    Every added row binds the trade's own purchase date, price and stock name.
    """

    def __init__(self, connection: Connection, sql: str):
        self._connection = connection
        self.sql = sql
        self._batch: list[tuple[str, int, str]] = []
        self.closed = False

    def __len__(self):
        return len(self._batch)

    def add_batch(self, trade: Trade) -> None:
        """Bind ``trade`` to the statement parameters and queue the row."""
        if self.closed:
            raise PersistenceError("Statement is closed")
        self._batch.append(trade_to_params(trade))

    def execute_batch(self) -> int:
        """Execute every queued row in one driver-level executemany.

        Returns:
            Number of rows submitted

        Raises:
            PersistenceError: If the statement is closed or the batch fails
        """
        if self.closed:
            raise PersistenceError("Statement is closed")

        pending = self._batch
        self._batch = []
        if not pending:
            return 0

        with translate_errors("Batch execution"):
            with self._connection.begin():
                self._connection.exec_driver_sql(self.sql, pending)

        logger.debug(f"Executed batch of {len(pending)} row(s)")
        return len(pending)

    def close(self) -> None:
        """Discard any unexecuted rows."""
        self._batch = []
        self.closed = True
