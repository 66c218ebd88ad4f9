"""Inventory ledger entries.

Every stock change is recorded as one immutable InventoryTransaction. For
any part, ``baseline_quantity + sum(in) - sum(out)`` equals the current
``stock_quantity``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TransactionType(Enum):
    IN = "in"
    OUT = "out"


class ReferenceType(Enum):
    ORDER = "order"
    ORDER_CANCELLATION = "order_cancellation"
    MANUAL_ADJUSTMENT = "manual_adjustment"


@dataclass(frozen=True)
class InventoryTransaction:
    """One append-only ledger row."""

    transaction_id: int
    part_id: int
    transaction_type: TransactionType
    quantity: int
    reason: str
    reference_id: int | None
    reference_type: ReferenceType
    previous_stock: int
    new_stock: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def signed_quantity(self) -> int:
        if self.transaction_type is TransactionType.IN:
            return self.quantity
        return -self.quantity


def net_movement(transactions: list[InventoryTransaction]) -> int:
    """Signed sum of ledger entries: total in minus total out."""
    return sum(t.signed_quantity for t in transactions)


def movement_to_level(current: int, target: int) -> tuple[TransactionType, int] | None:
    """Direction and size of the movement that takes *current* to *target*.

    None when the stock is already at *target*.
    """
    delta = target - current
    if delta == 0:
        return None
    if delta > 0:
        return TransactionType.IN, delta
    return TransactionType.OUT, -delta
