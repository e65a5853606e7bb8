"""Backing store session management.

A Session owns the single connection used for a run and exposes the three
store capabilities: the bulk write fast path, the query cursor and the
driver-level batch statement.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, func, insert, select
from sqlalchemy.engine import URL, Connection, Engine

from tradeingest.config import ConnectionSettings
from tradeingest.data_normalization import trade_to_row
from tradeingest.database.cursor import TradeQuery
from tradeingest.database.errors import (
    PersistenceError,
    StoreConnectionError,
    translate_errors,
)
from tradeingest.database.schema import EXTENT_NAME, trade_table
from tradeingest.database.statement import BatchStatement, render_insert
from tradeingest.models.trade import Trade

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

__all__ = [
    "EXTENT_NAME",
    "BatchStatement",
    "PersistenceError",
    "Session",
    "StoreConnectionError",
    "TradeQuery",
    "build_url",
    "open_session",
]


def build_url(settings: ConnectionSettings) -> URL:
    """Build the SQLAlchemy URL for the configured backing store.

    SQLite uses ``namespace`` as the database file; every other dialect
    connects to ``host:port`` with credentials and ``namespace`` as the
    database name.
    """
    if settings.dialect.split("+", 1)[0] == "sqlite":
        return URL.create(settings.dialect, database=settings.namespace)

    return URL.create(
        settings.dialect,
        username=settings.username,
        password=settings.password,
        host=settings.host,
        port=settings.port,
        database=settings.namespace,
    )


def _is_file_database(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database not in (
        None,
        "",
        ":memory:",
    )


class Session:
    """Single connection to the backing store.

    Usage:
        session = Session(settings)
        session.connect()
        try:
            session.reset_extent()
            session.bulk_write(trades)
        finally:
            session.close()
    """

    def __init__(self, settings: ConnectionSettings):
        """Initialize session (does not connect).

        Args:
            settings: Validated connection settings
        """
        self.settings = settings
        self.url = build_url(settings)
        self._engine: Engine | None = None
        self._connection: Connection | None = None
        self._open_queries: set[TradeQuery] = set()

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise PersistenceError("Session is not connected")
        return self._connection

    def connect(self) -> None:
        """Open the engine and the session connection.

        Raises:
            StoreConnectionError: If the database directory or connection
                cannot be created
        """
        if self._connection is not None:
            return

        # Ensure data directory exists for file databases
        if _is_file_database(self.url):
            try:
                Path(self.url.database).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(
                    f"Failed to create database directory for {self.url.database}: {e}",
                    exc_info=True,
                )
                raise StoreConnectionError(
                    f"Cannot create database directory: {e}"
                ) from e

        with translate_errors("Connection", StoreConnectionError):
            self._engine = create_engine(self.url)
            try:
                self._connection = self._engine.connect()
            except Exception:
                self._engine.dispose()
                self._engine = None
                raise

        logger.info(f"Connected to {self.url.render_as_string(hide_password=True)}")

    def _migration_config(self) -> Config:
        alembic_config = Config()
        alembic_config.set_main_option("script_location", str(MIGRATIONS_DIR))
        alembic_config.attributes["connection"] = self.connection
        return alembic_config

    def reset_extent(self) -> None:
        """Drop the trade extent and import its schema again.

        Runs the migrations down to base and back up to head on the session
        connection, leaving an empty trade table.

        Raises:
            PersistenceError: If the migrations fail
        """
        alembic_config = self._migration_config()
        with translate_errors("Extent reset"):
            with self.connection.begin():
                command.downgrade(alembic_config, "base")
                command.upgrade(alembic_config, "head")
        logger.info(f"Extent {EXTENT_NAME} reset")

    def bulk_write(self, trades: Sequence[Trade]) -> None:
        """Store a batch of trades in one executemany INSERT.

        Raises:
            PersistenceError: If the write fails (nothing is stored)
        """
        if not trades:
            return

        rows = [trade_to_row(trade) for trade in trades]
        with translate_errors("Bulk write"):
            with self.connection.begin():
                self.connection.execute(insert(trade_table), rows)

    def create_query(self, threshold: Decimal) -> TradeQuery:
        """Create a cursor over trades priced above ``threshold``."""
        query = TradeQuery(
            self.connection, threshold, on_close=self._open_queries.discard
        )
        self._open_queries.add(query)
        return query

    def prepare_insert(self) -> BatchStatement:
        """Prepare the positional INSERT used by the batch comparison."""
        sql = render_insert(self.connection.dialect.paramstyle)
        return BatchStatement(self.connection, sql)

    def count(self) -> int:
        """Number of rows in the trade extent."""
        with translate_errors("Count"):
            with self.connection.begin():
                return self.connection.execute(
                    select(func.count()).select_from(trade_table)
                ).scalar_one()

    def close(self) -> None:
        """Close open cursors, the connection and the engine. Safe to call twice."""
        for query in list(self._open_queries):
            try:
                query.close()
            except PersistenceError as e:
                logger.warning(f"Error closing query: {e}")
        self._open_queries.clear()

        if self._connection is not None:
            try:
                self._connection.close()
            except Exception as e:
                logger.warning(f"Error closing connection: {e}", exc_info=True)
            finally:
                self._connection = None

        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


@contextmanager
def open_session(settings: ConnectionSettings, reset: bool = True) -> Iterator[Session]:
    """Context manager for the backing store session.

    Connects, resets the trade extent (unless ``reset`` is False) and closes
    the session on every exit path.

    Raises:
        StoreConnectionError: If connecting fails
        PersistenceError: If the extent reset fails
    """
    session = Session(settings)
    session.connect()
    try:
        if reset:
            session.reset_extent()
        yield session
    finally:
        session.close()
