"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from kitstock.application.create_order import CreateOrderHandler
from kitstock.application.dto import CustomerInfo, MovementFailureDTO
from kitstock.application.show_order import ShowOrderHandler
from kitstock.application.update_order_status import UpdateOrderStatusHandler
from kitstock.config import get_config
from kitstock.domain.exceptions import DomainException
from kitstock.domain.model.order import OrderStatus
from kitstock.infrastructure.bootstrap import (
    inventory_ledger,
    order_repository,
    set_repository,
)
from kitstock.infrastructure.cli.parsing import parse_order_items


def _echo_failures(label: str, failures: list[MovementFailureDTO]) -> None:
    if not failures:
        return
    click.echo(f"Warning: {len(failures)} {label} failure(s), see server log:", err=True)
    for f in failures:
        target = f"part #{f.part_id}" if f.part_id is not None else "BOM"
        click.echo(f"  set #{f.set_id} {target}: {f.error}", err=True)


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--email", default=None, help="Customer e-mail.")
@click.option("--address", default=None, help="Shipping address.")
@click.option(
    "--items", required=True,
    help="Items as 'SetId:Qty@Price,...'; set id -1 is a fee line.",
)
@click.option(
    "--status", default=OrderStatus.PENDING.value, show_default=True,
    type=click.Choice([s.value for s in OrderStatus]), help="Initial status.",
)
@click.option("--notes", default=None, help="Order notes.")
@click.option("--json", "as_json", is_flag=True, help="Print the API response.")
def order_create(
    customer: str,
    email: str | None,
    address: str | None,
    items: str,
    status: str,
    notes: str | None,
    as_json: bool,
) -> None:
    """Create an order (allocates stock when the status reserves it)."""
    specs = parse_order_items(items)
    config = get_config()

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        set_repo=set_repository(),
        ledger=inventory_ledger(),
        fee_set_id=config.fee_set_id,
        clamp=config.clamp_over_deduction,
    )

    try:
        dto = handler.handle(
            CustomerInfo(name=customer, email=email, shipping_address=address),
            specs,
            status=status,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps(dto.to_dict(), indent=2))
    else:
        click.echo(f"Order #{dto.order_id} {dto.order_number} created  (status={dto.status})")
        click.echo(f"Total: {dto.total}")
        if dto.stock_allocated:
            click.echo(f"Stock allocated: {dto.units_allocated} unit(s)")
    _echo_failures("allocation", dto.allocation_failures)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status", required=True,
    type=click.Choice([s.value for s in OrderStatus]), help="New status.",
)
@click.option("--notes", default=None, help="Notes to store with the change.")
@click.option("--json", "as_json", is_flag=True, help="Print the API response.")
def order_status(order_id: int, status: str, notes: str | None, as_json: bool) -> None:
    """Update an order's status (restores stock on reserved -> cancelled)."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(),
        set_repo=set_repository(),
        ledger=inventory_ledger(),
    )

    try:
        dto = handler.handle(order_id, status, notes=notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps(dto.to_dict(), indent=2))
    else:
        click.echo(f"Order #{order_id}: {dto.previous_status} -> {dto.status}")
        if dto.stock_restored:
            click.echo(f"Stock restored: {dto.units_restored} unit(s)")
    _echo_failures("restoration", dto.restoration_failures)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Set':<8} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*44}")
    for item in dto.items:
        set_label = f"#{item.set_id}" if item.set_id is not None else "fee"
        click.echo(
            f"  {set_label:<8} {item.quantity:>5} {item.unit_price:>14} {item.line_total:>14}"
        )
    click.echo(f"  {'-'*44}")
    click.echo(f"  {'Order Total':<14} {dto.total:>29}")
