"""Parsers for the compact item syntax accepted on the command line."""

from __future__ import annotations

import click

from kitstock.application.define_set import BomLineSpec
from kitstock.application.dto import OrderItemSpec
from kitstock.domain.model.stock_check import CartLine


def _pairs(raw: str, expected: str):
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected '{expected}'."
            )
        yield pair.split(":", 1)


def _int(value: str, what: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise click.BadParameter(f"Invalid {what} '{value}'.")


def parse_cart(raw: str) -> list[CartLine]:
    """Parse '3:2,5:1' into cart lines."""
    return [
        CartLine(set_id=_int(set_id, "set id"), quantity=_int(qty, "quantity"))
        for set_id, qty in _pairs(raw, "SetId:Qty")
    ]


def parse_order_items(raw: str) -> list[OrderItemSpec]:
    """Parse '3:2@49.90,-1:1@4.99' into order item specs."""
    specs: list[OrderItemSpec] = []
    for set_id, rest in _pairs(raw, "SetId:Qty@Price"):
        qty, _, price = rest.partition("@")
        specs.append(
            OrderItemSpec(
                set_id=_int(set_id, "set id"),
                quantity=_int(qty, "quantity"),
                price=price.strip() or "0",
            )
        )
    return specs


def parse_bom(raw: str) -> list[BomLineSpec]:
    """Parse '1:2,2:0.5,7:1?' into BOM lines; a trailing '?' marks optional."""
    lines: list[BomLineSpec] = []
    for part_id, qty in _pairs(raw, "PartId:Qty[?]"):
        qty = qty.strip()
        optional = qty.endswith("?")
        lines.append(
            BomLineSpec(
                part_id=_int(part_id, "part id"),
                quantity=qty.rstrip("?"),
                is_optional=optional,
            )
        )
    return lines
