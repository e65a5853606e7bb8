"""Persistence error types."""

import logging
from contextlib import contextmanager

from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Base exception for backing store errors."""

    pass


class StoreConnectionError(PersistenceError):
    """Raised when connecting to the backing store fails."""

    pass


@contextmanager
def translate_errors(action: str, error_class: type[PersistenceError] = PersistenceError):
    """Re-raise SQLAlchemy and Alembic failures as persistence errors.

    Args:
        action: Short description used in the log line and error message
        error_class: PersistenceError subclass to raise

    Raises:
        PersistenceError: If the wrapped block raises a database error
    """
    try:
        yield
    except (SQLAlchemyError, CommandError) as e:
        logger.error(f"{action} failed: {e}", exc_info=True)
        raise error_class(f"{action} failed: {e}") from e
