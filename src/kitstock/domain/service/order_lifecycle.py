"""Domain service: Order Lifecycle Controller.

Stock consequences of order status changes are spelled out in
``TRANSITION_TABLE``: a list of (from-statuses, to-statuses, action)
rows. Only the single edge of one update is looked up; the order's
earlier history is not consulted. Consequently an order that goes
``pending -> shipped -> cancelled`` gets nothing back: stock that has
left the reserved phase is handled by the returns process, not here.
"""

from __future__ import annotations

from enum import Enum

from kitstock.domain.model.order import Order, OrderStatus
from kitstock.domain.model.stock_check import MovementReport
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.domain.service.bom_resolver import BomResolver
from kitstock.domain.service.stock_allocator import StockAllocator
from kitstock.domain.service.stock_restorer import StockRestorer
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


class StockAction(Enum):
    NONE = "none"
    RESTORE = "restore"


# Stock is considered allocated to the order.
RESERVED_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PENDING_PAYMENT,
        OrderStatus.PAYMENT_RECEIVED,
    }
)

# The order will not consume its reserved stock.
CANCELLED_STATUSES = frozenset(
    {
        OrderStatus.CANCELLED,
        OrderStatus.FAILED,
        OrderStatus.PAYMENT_FAILED,
        OrderStatus.REFUNDED,
    }
)

TRANSITION_TABLE: tuple[tuple[frozenset[OrderStatus], frozenset[OrderStatus], StockAction], ...] = (
    (RESERVED_STATUSES, CANCELLED_STATUSES, StockAction.RESTORE),
)


def stock_action_for(previous: OrderStatus, new: OrderStatus) -> StockAction:
    """Look up the stock action for one status edge."""
    for from_statuses, to_statuses, action in TRANSITION_TABLE:
        if previous in from_statuses and new in to_statuses:
            return action
    return StockAction.NONE


def allocates_on_creation(initial_status: OrderStatus) -> bool:
    return initial_status in RESERVED_STATUSES


class OrderLifecycleController:

    def __init__(self, allocator: StockAllocator, restorer: StockRestorer) -> None:
        self._allocator = allocator
        self._restorer = restorer

    @staticmethod
    def build(
        set_repo: SetRepository, ledger: InventoryLedger, clamp: bool = True
    ) -> OrderLifecycleController:
        resolver = BomResolver(set_repo)
        return OrderLifecycleController(
            allocator=StockAllocator(resolver, ledger, clamp=clamp),
            restorer=StockRestorer(resolver, ledger),
        )

    def order_created(self, order: Order) -> MovementReport | None:
        """Allocate stock for a freshly persisted order, if its status reserves stock."""
        if not allocates_on_creation(order.status):
            logger.info(
                "Order {} created as {}; no stock allocated",
                order.order_number, order.status.value,
            )
            return None
        return self._allocator.allocate_for_order(order)

    def status_changed(
        self, order: Order, previous: OrderStatus
    ) -> MovementReport | None:
        """Apply the stock action for ``previous -> order.status``."""
        action = stock_action_for(previous, order.status)
        if action is StockAction.RESTORE:
            logger.info(
                "Restoring stock for order {} ({} -> {})",
                order.order_number, previous.value, order.status.value,
            )
            return self._restorer.restore_for_order(order)
        return None
