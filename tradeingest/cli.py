"""CLI interface for the ingestion comparison demo.

Commands:
    menu [--config PATH]               Interactive menu
    compare --count N [--config PATH]  One non-interactive comparison run
"""

import logging
import os
import random
import sys

import click
from dotenv import load_dotenv

from tradeingest.config import ConfigError, ConnectionSettings, load_settings
from tradeingest.database import PersistenceError, StoreConnectionError, open_session
from tradeingest.menu import MenuLoop, format_elapsed
from tradeingest.models.trade import generate_sample_data
from tradeingest.operations import store_trades, store_using_batch, view_all

# Load environment variables
load_dotenv()


def resolve_log_level(name: str | None) -> int:
    """Map a LOG_LEVEL name to a logging level, WARNING when unknown."""
    level = logging.getLevelName((name or "WARNING").strip().upper())
    return level if isinstance(level, int) else logging.WARNING


# Configure logging for CLI
logging.basicConfig(
    level=resolve_log_level(os.getenv("LOG_LEVEL")),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

config_option = click.option(
    "--config",
    "config_path",
    default="config.txt",
    show_default=True,
    envvar="TRADEINGEST_CONFIG",
    help="Connection config file with key:value lines. "
    "Defaults to TRADEINGEST_CONFIG from .env when set",
)


def _load_settings_or_exit(config_path: str) -> ConnectionSettings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"✗ Configuration error: {str(e)}", err=True)
        sys.exit(1)


@click.group()
def cli():
    """tradeingest CLI - bulk write vs batch statement ingestion timings."""
    pass


@cli.command()
@config_option
def menu(config_path: str):
    """Run the interactive menu.

    Connects once, resets the trade extent, then loops over menu commands
    until Quit is chosen.
    """
    settings = _load_settings_or_exit(config_path)

    try:
        with open_session(settings) as session:
            click.echo(f"Connected to {settings.dialect} database {settings.namespace}.")
            MenuLoop(session).run()
    except StoreConnectionError as e:
        click.echo(f"✗ Connection failed: {str(e)}", err=True)
        sys.exit(1)
    except PersistenceError as e:
        click.echo(f"✗ Interactive prompt failed: {str(e)}", err=True)
        sys.exit(1)


@cli.command()
@config_option
@click.option(
    "--count",
    type=click.IntRange(min=0),
    default=1000,
    show_default=True,
    help="Number of trades generated for each store path",
)
@click.option("--seed", type=int, help="Seed for reproducible sample data")
def compare(config_path: str, count: int, seed: int | None):
    """Store COUNT trades through each path and rewrite them all.

    Runs the bulk write, the batch statement and the query rewrite once each
    and prints every execution time.
    """
    settings = _load_settings_or_exit(config_path)
    rng = random.Random(seed)

    try:
        with open_session(settings) as session:
            logger.info(f"Starting comparison with {count} trade(s) per path")

            result = store_trades(session, generate_sample_data(count, rng))
            click.echo(
                f"Bulk write: {result['count']} trade(s). "
                f"{format_elapsed(result['elapsed_ms'])}"
            )

            result = store_using_batch(session, generate_sample_data(count, rng))
            if result["status"] == "success":
                click.echo(
                    f"Batch statement: {result['count']} trade(s). "
                    f"{format_elapsed(result['elapsed_ms'])}"
                )
            else:
                click.echo("✗ Batch statement failed", err=True)
                for error in result["errors"]:
                    click.echo(f"  - {error}", err=True)

            result = view_all(session)
            click.echo(
                f"Query rewrite: {result['count']} trade(s). "
                f"{format_elapsed(result['elapsed_ms'])}"
            )
    except StoreConnectionError as e:
        click.echo(f"✗ Connection failed: {str(e)}", err=True)
        sys.exit(1)
    except PersistenceError as e:
        click.echo(f"✗ Error: {str(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
