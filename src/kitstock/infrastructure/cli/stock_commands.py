"""CLI commands for stock validation, adjustment and the ledger."""

from __future__ import annotations

import json

import click

from kitstock.application.adjust_stock import ADJUSTMENT_TYPES, AdjustStockHandler
from kitstock.application.ledger_history import LedgerHistoryHandler
from kitstock.application.reconcile_ledger import ReconcileLedgerHandler
from kitstock.application.show_inventory import ShowInventoryHandler
from kitstock.application.validate_stock import ValidateStockHandler
from kitstock.config import get_config
from kitstock.domain.exceptions import DomainException
from kitstock.infrastructure.bootstrap import (
    inventory_ledger,
    part_repository,
    set_repository,
)
from kitstock.infrastructure.cli.parsing import parse_cart


@click.command("validate")
@click.option("--items", required=True, help="Cart as 'SetId:Qty,SetId:Qty'.")
@click.option("--json", "as_json", is_flag=True, help="Print the API response.")
def stock_validate(items: str, as_json: bool) -> None:
    """Check stock availability for a cart (reserves nothing)."""
    handler = ValidateStockHandler(
        set_repo=set_repository(),
        part_repo=part_repository(),
        fee_set_id=get_config().fee_set_id,
    )
    report = handler.handle(parse_cart(items))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        for line in report.results:
            mark = "OK " if line.valid else "NO "
            click.echo(f"{mark} set #{line.set_id}" + (f"  ({line.error})" if line.error else ""))
            for p in line.insufficient_parts:
                click.echo(
                    f"      {p.part_name}: need {p.required}, have {p.available} "
                    f"(short {p.shortfall})"
                )
        click.echo(
            f"{report.valid_items}/{len(report.results)} line(s) available"
        )

    if not report.valid:
        raise SystemExit(1)


@click.command("adjust")
@click.option("--part", "part_id", required=True, type=int, help="Part ID.")
@click.option("--type", "adjustment_type", required=True, type=click.Choice(ADJUSTMENT_TYPES))
@click.option("--quantity", required=True, type=int, help="Units (or target level for 'set').")
@click.option("--reason", default="", help="Reason recorded in the ledger.")
def stock_adjust(part_id: int, adjustment_type: str, quantity: int, reason: str) -> None:
    """Manually adjust a part's stock through the ledger."""
    handler = AdjustStockHandler(part_repo=part_repository(), ledger=inventory_ledger())

    try:
        dto = handler.handle(part_id, adjustment_type, quantity, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Part #{dto.part_id}: {dto.previous_stock} -> {dto.new_stock} ({dto.adjustment})")


@click.command("show")
def stock_show() -> None:
    """Show current stock levels."""
    summary = ShowInventoryHandler(part_repo=part_repository()).handle()

    if not summary.lines:
        click.echo("No parts found.")
        return

    click.echo(f"{'ID':<6} {'Part':<28} {'Stock':>8} {'Min':>6}  Flags")
    click.echo("-" * 58)
    for line in summary.lines:
        flags = "OUT" if line.is_out_of_stock else ("LOW" if line.is_low_stock else "")
        click.echo(
            f"{line.part_id:<6} {line.part_name:<28} {line.stock:>8} {line.minimum:>6}  {flags}"
        )
    click.echo("-" * 58)
    click.echo(
        f"{summary.total_parts} part(s), {summary.total_stock} unit(s); "
        f"{summary.low_stock_count} low, {summary.out_of_stock_count} out of stock"
    )


@click.command("history")
@click.option("--part", "part_id", required=True, type=int, help="Part ID.")
@click.option("--limit", default=50, show_default=True, type=int)
@click.option("--offset", default=0, type=int)
@click.option("--newest-first", is_flag=True, help="Reverse chronological order.")
@click.option("--json", "as_json", is_flag=True, help="Print the API response.")
def stock_history(
    part_id: int, limit: int, offset: int, newest_first: bool, as_json: bool
) -> None:
    """Show a part's ledger entries."""
    handler = LedgerHistoryHandler(ledger=inventory_ledger(), part_repo=part_repository())

    try:
        entries = handler.handle(part_id, limit=limit, offset=offset, newest_first=newest_first)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps({"transactions": [e.to_dict() for e in entries]}, indent=2))
        return

    if not entries:
        click.echo("No ledger entries.")
        return
    for e in entries:
        sign = "+" if e.transaction_type == "in" else "-"
        click.echo(
            f"{e.created_at[:19]}  {sign}{e.quantity:<5} {e.previous_stock:>6} -> "
            f"{e.new_stock:<6} {e.reference_type:<20} {e.reason}"
        )


@click.command("reconcile")
def stock_reconcile() -> None:
    """Check every part's stock against baseline plus ledger."""
    lines = ReconcileLedgerHandler(
        part_repo=part_repository(), ledger=inventory_ledger()
    ).handle()

    drifting = [line for line in lines if not line.consistent]
    for line in drifting:
        click.echo(
            f"Part #{line.part_id} {line.part_name}: expected {line.expected}, "
            f"found {line.actual} (drift {line.drift:+d})"
        )
    click.echo(f"{len(lines) - len(drifting)}/{len(lines)} part(s) consistent with the ledger")
    if drifting:
        raise SystemExit(1)
