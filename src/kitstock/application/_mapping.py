"""Domain -> DTO mapping shared by the order use cases."""

from __future__ import annotations

from kitstock.application.dto import (
    LedgerEntryDTO,
    MovementFailureDTO,
    OrderDTO,
    OrderLineItemDTO,
)
from kitstock.domain.model.ledger import InventoryTransaction
from kitstock.domain.model.order import Order
from kitstock.domain.model.stock_check import MovementReport


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer_name=order.customer_name,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                set_id=item.set_id,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        notes=order.notes,
    )


def failures_to_dto(report: MovementReport | None) -> list[MovementFailureDTO]:
    if report is None:
        return []
    return [
        MovementFailureDTO(set_id=f.set_id, part_id=f.part_id, error=f.error)
        for f in report.failures
    ]


def transaction_to_dto(txn: InventoryTransaction) -> LedgerEntryDTO:
    return LedgerEntryDTO(
        transaction_id=txn.transaction_id,
        part_id=txn.part_id,
        transaction_type=txn.transaction_type.value,
        quantity=txn.quantity,
        reason=txn.reason,
        reference_id=txn.reference_id,
        reference_type=txn.reference_type.value,
        previous_stock=txn.previous_stock,
        new_stock=txn.new_stock,
        created_at=txn.created_at.isoformat(),
    )
