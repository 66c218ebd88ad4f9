"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals. ``to_dict()`` gives the JSON shape returned
to API consumers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: a requested line (set id + quantity + unit price).

    ``set_id`` None (or the fee sentinel) marks a non-physical charge.
    """

    set_id: int | None
    quantity: int
    price: str | Decimal = "0"


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str | None = None
    shipping_address: str | None = None


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    set_id: int | None
    quantity: int
    unit_price: str  # formatted, e.g. "15.00 EUR"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    customer_name: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str
    notes: str | None = None


@dataclass(frozen=True)
class MovementFailureDTO:
    set_id: int
    part_id: int | None
    error: str


@dataclass(frozen=True)
class OrderCreatedDTO:
    order_id: int
    order_number: str
    status: str
    total: str
    stock_allocated: bool
    units_allocated: int = 0
    allocation_failures: list[MovementFailureDTO] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "message": "Order created successfully",
            "order_id": self.order_id,
            "order_number": self.order_number,
        }


@dataclass(frozen=True)
class StatusUpdateDTO:
    order_id: int
    previous_status: str
    status: str
    stock_restored: bool
    units_restored: int = 0
    restoration_failures: list[MovementFailureDTO] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "message": "Order status updated successfully",
            "order_id": self.order_id,
            "status": self.status,
        }


@dataclass(frozen=True)
class LedgerEntryDTO:
    transaction_id: int
    part_id: int
    transaction_type: str
    quantity: int
    reason: str
    reference_id: int | None
    reference_type: str
    previous_stock: int
    new_stock: int
    created_at: str

    def to_dict(self) -> dict:
        return {
            "part_id": self.part_id,
            "transaction_type": self.transaction_type,
            "quantity": self.quantity,
            "reason": self.reason,
            "reference_id": self.reference_id,
            "reference_type": self.reference_type,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class StockAdjustmentDTO:
    part_id: int
    previous_stock: int
    new_stock: int
    adjustment: str  # "+5", "-3", "set to 10"
