"""CLI commands for registering parts and defining sets."""

from __future__ import annotations

import click

from kitstock.application.add_part import AddPartHandler
from kitstock.application.define_set import DefineSetHandler
from kitstock.domain.exceptions import DomainException
from kitstock.infrastructure.bootstrap import part_repository, set_repository
from kitstock.infrastructure.cli.parsing import parse_bom


@click.command("add")
@click.option("--name", required=True, help="Part name.")
@click.option("--stock", default=0, type=int, help="Opening stock.")
@click.option("--minimum", default=0, type=int, help="Reorder threshold.")
@click.option("--number", "part_number", default=None, help="Part number.")
def part_add(name: str, stock: int, minimum: int, part_number: str | None) -> None:
    """Register a new part with its opening stock."""
    handler = AddPartHandler(part_repo=part_repository())

    try:
        part = handler.handle(name, stock, minimum, part_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part #{part.part_id} '{part.name}' added with {part.stock_quantity} in stock")


@click.command("list")
def part_list() -> None:
    """List all parts."""
    parts = part_repository().list_all()

    if not parts:
        click.echo("No parts found.")
        return

    click.echo(f"{'ID':<6} {'Number':<12} {'Name':<28} {'Stock':>8}")
    click.echo("-" * 57)
    for p in parts:
        click.echo(f"{p.part_id:<6} {p.part_number or '':<12} {p.name:<28} {p.stock_quantity:>8}")


@click.command("add")
@click.option("--name", required=True, help="Set name.")
@click.option("--parts", "bom", default="", help="BOM as 'PartId:Qty,...'; suffix '?' = optional.")
def set_add(name: str, bom: str) -> None:
    """Define a set and its bill of materials."""
    handler = DefineSetHandler(set_repo=set_repository(), part_repo=part_repository())

    try:
        kit_set = handler.handle(name, parse_bom(bom))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Set #{kit_set.set_id} '{kit_set.name}' defined with {len(kit_set.bom)} BOM line(s)")


@click.command("show")
@click.option("--id", "set_id", required=True, type=int, help="Set ID.")
def set_show(set_id: int) -> None:
    """Show a set's bill of materials."""
    kit_set = set_repository().get_by_id(set_id)
    if kit_set is None:
        raise click.ClickException(f"Set #{set_id} not found")

    click.echo(f"Set #{kit_set.set_id} {kit_set.name}")
    if not kit_set.bom:
        click.echo("  (no parts configured)")
        return
    for entry in kit_set.bom:
        optional = "  optional" if entry.is_optional else ""
        click.echo(f"  part #{entry.part_id:<6} x {entry.quantity}{optional}")
