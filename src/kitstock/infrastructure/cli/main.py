import click

from kitstock.infrastructure.cli.catalog_commands import part_add, part_list, set_add, set_show
from kitstock.infrastructure.cli.order_commands import order_create, order_show, order_status
from kitstock.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_history,
    stock_reconcile,
    stock_show,
    stock_validate,
)
from kitstock.logging_config import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override KITSTOCK_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """kitstock: inventory consistency for kit orders"""
    configure_logging(log_level)


@cli.group()
def order() -> None:
    """Create orders and change their status."""


@cli.group()
def stock() -> None:
    """Validate, adjust and audit stock."""


@cli.group()
def part() -> None:
    """Manage parts."""


@cli.group(name="set")
def kit_set() -> None:
    """Manage sets and their bills of materials."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_status)
order.add_command(order_show)
stock.add_command(stock_validate)
stock.add_command(stock_adjust)
stock.add_command(stock_show)
stock.add_command(stock_history)
stock.add_command(stock_reconcile)
part.add_command(part_add)
part.add_command(part_list)
kit_set.add_command(set_add)
kit_set.add_command(set_show)
