"""Application service: Update Order Status use case.

The new status is saved first; the stock action for the edge (if any)
runs afterwards and cannot undo the status change.
"""

from __future__ import annotations

from kitstock.application._mapping import failures_to_dto
from kitstock.application.dto import StatusUpdateDTO
from kitstock.domain.exceptions import EntityNotFoundError
from kitstock.domain.model.order import OrderStatus
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.order_repository import OrderRepository
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.domain.service.order_lifecycle import OrderLifecycleController


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        set_repo: SetRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repo
        self._set_repo = set_repo
        self._ledger = ledger

    def handle(
        self, order_id: int, status: str | OrderStatus, notes: str | None = None
    ) -> StatusUpdateDTO:
        new_status = OrderStatus.parse(status)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        previous = order.change_status(new_status, notes=notes)
        self._order_repo.save(order)

        controller = OrderLifecycleController.build(self._set_repo, self._ledger)
        report = controller.status_changed(order, previous)

        return StatusUpdateDTO(
            order_id=order_id,
            previous_status=previous.value,
            status=order.status.value,
            stock_restored=report is not None,
            units_restored=report.units_moved if report else 0,
            restoration_failures=failures_to_dto(report),
        )
