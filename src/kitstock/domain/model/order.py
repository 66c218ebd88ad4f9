"""Order aggregate.

The Order owns its line items. Line items are fixed once the order is
created; only the status (and notes) change afterwards.
"""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    PAYMENT_RECEIVED = "payment_received"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    FAILED = "failed"
    PAYMENT_FAILED = "payment_failed"
    REFUNDED = "refunded"

    @staticmethod
    def parse(raw: str | OrderStatus) -> OrderStatus:
        if isinstance(raw, OrderStatus):
            return raw
        try:
            return OrderStatus(str(raw).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status '{raw}'. Expected one of: {allowed}"
            ) from None


@dataclass(frozen=True)
class OrderLineItem:
    """A priced line on an order.

    ``set_id`` is None for non-physical charges (handling fees); those
    lines never touch stock.
    """

    set_id: int | None
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50
ORDER_NUMBER_PREFIX = "ORD"


def generate_order_number(now: float | None = None) -> str:
    """Human-readable order number: ``ORD-<epoch millis>-<5 base36 chars>``."""
    millis = int((now if now is not None else time.time()) * 1000)
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"{ORDER_NUMBER_PREFIX}-{millis}-{suffix}"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    customer_name: str
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    customer_email: str | None = None
    shipping_address: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_name: str,
        items: list[OrderLineItem],
        status: OrderStatus = OrderStatus.PENDING,
        customer_email: str | None = None,
        shipping_address: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        currencies = {item.unit_price.currency for item in items}
        if len(currencies) > 1:
            raise ValidationError("All line items must use the same currency")

        return Order(
            id=None,
            order_number=generate_order_number(),
            customer_name=customer_name.strip(),
            items=list(items),
            status=status,
            customer_email=customer_email,
            shipping_address=shipping_address,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus, notes: str | None = None) -> OrderStatus:
        """Move the order to *new_status* and return the previous status.

        Any status may follow any other; what the change means for stock is
        decided by the lifecycle transition table, not here.
        """
        previous = self.status
        self.status = new_status
        if notes:
            self.notes = notes
        self.updated_at = datetime.now(timezone.utc)
        return previous

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero(self.items[0].unit_price.currency) if self.items else Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result
