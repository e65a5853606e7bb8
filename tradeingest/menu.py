"""Interactive command menu.

Commands:
    1  Generate and save multiple trades (bulk write fast path)
    2  Retrieve all trades, rewrite their stock names; show execution time
    3  Batch statement comparison - generate and save multiple trades
    4  Quit
"""

import logging
import random
from enum import Enum
from typing import Any, Callable

import click

from tradeingest.database.errors import PersistenceError
from tradeingest.models.trade import generate_sample_data
from tradeingest.operations import store_trades, store_using_batch, view_all
from tradeingest.store import Store

logger = logging.getLogger(__name__)


class Command(Enum):
    GENERATE_AND_STORE = "1"
    VIEW_ALL = "2"
    BATCH_COMPARISON = "3"
    QUIT = "4"


MENU_LABELS = {
    Command.GENERATE_AND_STORE: "Generate and save multiple trades",
    Command.VIEW_ALL: "Retrieve all trades; show execution statistics",
    Command.BATCH_COMPARISON: "Batch statement comparison - Create and save multiple trades",
    Command.QUIT: "Quit",
}


def parse_command(token: str) -> Command | None:
    """Map a menu token to its Command, or None if it is not one."""
    try:
        return Command(token.strip())
    except ValueError:
        return None


def format_elapsed(elapsed_ms: float) -> str:
    return f"Execution time: {elapsed_ms:.0f}ms"


class MenuLoop:
    """Read commands and run the matching timed operation until QUIT.

    Args:
        store: Open store the operations run against
        prompt: Callable with the ``click.prompt`` signature
        echo: Callable with the ``click.echo`` signature
        rng: Optional random generator for sample data
    """

    def __init__(
        self,
        store: Store,
        prompt: Callable[..., Any] = click.prompt,
        echo: Callable[..., Any] = click.echo,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.prompt = prompt
        self.echo = echo
        self.rng = rng
        self.running = False

        self._handlers = self._build_handlers()
        unhandled = set(Command) - set(self._handlers)
        if unhandled:
            raise TypeError(
                f"No handler for commands: {sorted(c.name for c in unhandled)}"
            )

    def _build_handlers(self) -> dict[Command, Callable[[], None]]:
        return {
            Command.GENERATE_AND_STORE: self._generate_and_store,
            Command.VIEW_ALL: self._view_all,
            Command.BATCH_COMPARISON: self._batch_comparison,
            Command.QUIT: self._quit,
        }

    def show_menu(self) -> None:
        for command in Command:
            self.echo(f"{command.value}. {MENU_LABELS[command]}")

    def run(self) -> None:
        """Run until the QUIT command is read."""
        self.running = True
        while self.running:
            self.show_menu()
            token = self.prompt("What would you like to do?")
            command = parse_command(str(token))
            if command is None:
                logger.debug(f"Unrecognized menu option {token!r}")
                self.echo("Invalid option. Try again!")
                continue
            self.dispatch(command)

    def dispatch(self, command: Command) -> None:
        """Run the handler for ``command``; persistence failures are reported."""
        try:
            self._handlers[command]()
        except PersistenceError as e:
            logger.error(f"{command.name} failed: {e}")
            self.echo(f"Operation failed: {e}", err=True)

    def _ask_count(self, text: str) -> int:
        return self.prompt(text, type=click.IntRange(min=0))

    def _generate_and_store(self) -> None:
        number = self._ask_count("How many items do you want to generate?")
        trades = generate_sample_data(number, self.rng)

        result = store_trades(self.store, trades)
        self.echo(f"Saved {result['count']} trade(s).")
        self.echo(format_elapsed(result["elapsed_ms"]))

    def _view_all(self) -> None:
        self.echo("Fetching all. Please wait...")
        result = view_all(self.store)
        self.echo(f"Total amount of transactions read is {result['count']}")
        self.echo(format_elapsed(result["elapsed_ms"]))

    def _batch_comparison(self) -> None:
        number = self._ask_count(
            "How many items to generate using the batch statement?"
        )
        trades = generate_sample_data(number, self.rng)

        result = store_using_batch(self.store, trades)
        if result["status"] == "success":
            self.echo(
                f"Inserted {result['count']} item(s) via batch statement successfully."
            )
        else:
            for error in result["errors"]:
                self.echo(f"  - {error}", err=True)
        self.echo(format_elapsed(result["elapsed_ms"]))

    def _quit(self) -> None:
        self.echo("Exited.")
        self.running = False
