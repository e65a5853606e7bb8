"""Store capability interface used by the timed operations and the menu.

``tradeingest.database.Session`` is the real implementation; tests drive the
operations with an in-memory store implementing the same methods.
"""

from collections.abc import Iterator, Sequence
from decimal import Decimal
from typing import Protocol

from tradeingest.models.trade import Trade


class Cursor(Protocol):
    def execute(self) -> None: ...

    def __iter__(self) -> Iterator[Trade]: ...

    def set(self, trade: Trade) -> None: ...

    def close(self) -> None: ...


class Statement(Protocol):
    def add_batch(self, trade: Trade) -> None: ...

    def execute_batch(self) -> int: ...

    def close(self) -> None: ...


class Store(Protocol):
    def bulk_write(self, trades: Sequence[Trade]) -> None: ...

    def create_query(self, threshold: Decimal) -> Cursor: ...

    def prepare_insert(self) -> Statement: ...
