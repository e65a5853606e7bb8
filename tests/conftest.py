"""Pytest configuration and shared fixtures."""

import os
import random
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from tradeingest.config import ConnectionSettings
from tradeingest.models.trade import Trade


@pytest.fixture(scope="function")
def temp_db_path():
    """Create a temporary database file for testing."""
    with tempfile.NamedTemporaryFile(delete=False, suffix=".db") as tmp:
        db_path = tmp.name
    yield db_path
    if os.path.exists(db_path):
        os.remove(db_path)


@pytest.fixture
def write_config(tmp_path):
    """Write config file lines and return the file path."""

    def _write(*lines, name="config.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sqlite_settings(temp_db_path):
    """Connection settings for a temporary SQLite database."""
    return ConnectionSettings(
        host="127.0.0.1",
        port=51773,
        namespace=temp_db_path,
        username="_SYSTEM",
        password="SYS",
        dialect="sqlite",
    )


@pytest.fixture
def sqlite_config(write_config, temp_db_path):
    """Config file pointing at a temporary SQLite database."""
    return write_config(
        "dialect: sqlite",
        "ip: 127.0.0.1",
        "port: 51773",
        f"namespace: {temp_db_path}",
        "username: _SYSTEM",
        "password: SYS",
    )


@pytest.fixture
def session(sqlite_settings):
    """Open session with a freshly reset trade extent."""
    from tradeingest.database import open_session

    with open_session(sqlite_settings) as session:
        yield session


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sample_trades():
    """Three trades with distinct dates and prices."""
    return [
        Trade(date(2016, 8, 12), Decimal("150.25"), "IBM"),
        Trade(date(2012, 1, 3), Decimal("12.50"), "AAPL"),
        Trade(date(2018, 6, 30), Decimal("999.99"), "AAPL"),
    ]
