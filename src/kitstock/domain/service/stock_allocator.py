"""Domain service: Stock Allocator.

Deducts a new order's BOM requirements from part stock, writing one
``out`` ledger entry per part.

By default an over-deduction is clamped: stock floors at zero and the
deficit is absorbed (and logged) rather than rejected, which can hide a
set that was already oversold. With ``clamp=False`` the part is left
untouched and the shortfall shows up as a failure in the report instead.
"""

from __future__ import annotations

from kitstock.domain.model.ledger import ReferenceType, TransactionType
from kitstock.domain.model.order import Order
from kitstock.domain.model.stock_check import MovementReport
from kitstock.domain.service.order_stock_movement import OrderStockMovementService


class StockAllocator(OrderStockMovementService):

    transaction_type = TransactionType.OUT
    reference_type = ReferenceType.ORDER
    verb = "allocate"

    def allocate_for_order(self, order: Order) -> MovementReport:
        """Deduct stock for every physical line item of *order*.

        Never raises for stock problems; see ``MovementReport.failures``.
        """
        return self._move_for_order(order)

    def _reason(self, order: Order, set_id: int) -> str:
        return f"Order {order.order_number} - Set {set_id}"
