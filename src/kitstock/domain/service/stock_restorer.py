"""Domain service: Stock Restorer.

Inverse of the allocator: puts an order's BOM requirements back into
stock with one ``in`` ledger entry per part. The full requirement is
restored even if the allocation had been clamped.
"""

from __future__ import annotations

from kitstock.domain.model.ledger import ReferenceType, TransactionType
from kitstock.domain.model.order import Order
from kitstock.domain.model.stock_check import MovementReport
from kitstock.domain.service.order_stock_movement import OrderStockMovementService


class StockRestorer(OrderStockMovementService):

    transaction_type = TransactionType.IN
    reference_type = ReferenceType.ORDER_CANCELLATION
    verb = "restore"

    def restore_for_order(self, order: Order) -> MovementReport:
        """Add back stock for every physical line item of *order*."""
        return self._move_for_order(order)

    def _reason(self, order: Order, set_id: int) -> str:
        return f"Order {order.order_number} cancelled - Set {set_id}"
