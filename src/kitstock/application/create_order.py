"""Application service: Create Order use case.

Builds and persists the order, then hands it to the lifecycle controller,
which allocates stock when the initial status reserves it. Allocation
problems never fail the request: the order is already saved, and any
per-part failure is only logged and reported back in the DTO.
"""

from __future__ import annotations

from kitstock.application._mapping import failures_to_dto
from kitstock.application.dto import CustomerInfo, OrderCreatedDTO, OrderItemSpec
from kitstock.domain.exceptions import EntityNotFoundError
from kitstock.domain.model.order import Order, OrderLineItem, OrderStatus
from kitstock.domain.model.value_objects import Money, Quantity
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.order_repository import OrderRepository
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.domain.service.order_lifecycle import OrderLifecycleController
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        set_repo: SetRepository,
        ledger: InventoryLedger,
        fee_set_id: int = -1,
        clamp: bool = True,
    ) -> None:
        self._order_repo = order_repo
        self._set_repo = set_repo
        self._ledger = ledger
        self._fee_set_id = fee_set_id
        self._clamp = clamp

    def handle(
        self,
        customer: CustomerInfo,
        item_specs: list[OrderItemSpec],
        status: str | OrderStatus = OrderStatus.PENDING,
        notes: str | None = None,
    ) -> OrderCreatedDTO:
        """Create an order and allocate its stock.

        Steps:
        1. Check every physical line refers to a known set.
        2. Build line items with the submitted prices (snapshot).
        3. Let the Order aggregate validate its rules, then persist it.
        4. Allocate stock (best effort, once).
        """
        line_items = [self._to_line_item(spec) for spec in item_specs]

        order = Order.create(
            customer_name=customer.name,
            items=line_items,
            status=OrderStatus.parse(status),
            customer_email=customer.email,
            shipping_address=customer.shipping_address,
            notes=notes,
        )
        self._order_repo.save(order)
        logger.info("Created order {} (#{})", order.order_number, order.id)

        controller = OrderLifecycleController.build(
            self._set_repo, self._ledger, clamp=self._clamp
        )
        report = controller.order_created(order)

        return OrderCreatedDTO(
            order_id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            status=order.status.value,
            total=str(order.total),
            stock_allocated=report is not None,
            units_allocated=report.units_moved if report else 0,
            allocation_failures=failures_to_dto(report),
        )

    def _to_line_item(self, spec: OrderItemSpec) -> OrderLineItem:
        set_id = spec.set_id
        if set_id == self._fee_set_id:
            set_id = None
        if set_id is not None and self._set_repo.get_by_id(set_id) is None:
            raise EntityNotFoundError(f"Set not found: #{set_id}")
        return OrderLineItem(
            set_id=set_id,
            quantity=Quantity(spec.quantity),
            unit_price=Money.of(spec.price),
        )
