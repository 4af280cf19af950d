from __future__ import annotations

from pathlib import Path

import click

from stockledger.infrastructure import bootstrap
from stockledger.infrastructure.config import Settings
from stockledger.infrastructure.cli.customer_commands import customer_add, customer_list
from stockledger.infrastructure.cli.inventory_commands import (
    inventory_adjust,
    inventory_history,
    inventory_lookup,
    inventory_show,
)
from stockledger.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_edit,
    order_fulfill,
    order_list,
    order_show,
)
from stockledger.infrastructure.logging import configure_logging

_VERBOSITY = {0: None, 1: "INFO"}


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="STOCKLEDGER_DATA_DIR",
    help="Directory holding store.json.",
)
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug).")
def cli(data_dir: Path | None, verbose: int) -> None:
    """stockledger: orders and inventory reservations"""
    settings = Settings.from_env().with_overrides(
        data_dir=data_dir, log_level=_VERBOSITY.get(verbose, "DEBUG")
    )
    bootstrap.use_settings(settings)
    configure_logging(settings.log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def customer() -> None:
    """Manage customers."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_edit)
order.add_command(order_fulfill)
order.add_command(order_list)
order.add_command(order_show)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_history)
inventory.add_command(inventory_lookup)
inventory.add_command(inventory_show)
customer.add_command(customer_add)
customer.add_command(customer_list)
