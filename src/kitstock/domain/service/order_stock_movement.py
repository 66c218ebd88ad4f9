"""Shared loop for moving stock on behalf of an order.

Walks the order's physical line items in order, resolves each set's BOM
and applies one ledger movement per required part, in BOM listing order.
Each part is its own unit of work: a failing part is logged, recorded in
the report and skipped, and the remaining parts still move. An order can
therefore end up with only part of its stock moved; the ledger shows
exactly which parts were touched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.ledger import (
    InventoryTransaction,
    ReferenceType,
    TransactionType,
)
from kitstock.domain.model.order import Order
from kitstock.domain.model.stock_check import (
    MovementFailure,
    MovementReport,
    PartRequirement,
)
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.service.bom_resolver import BomResolver
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


class OrderStockMovementService(ABC):
    """Base for the allocator and the restorer."""

    transaction_type: TransactionType
    reference_type: ReferenceType
    verb: str

    def __init__(
        self,
        bom_resolver: BomResolver,
        ledger: InventoryLedger,
        clamp: bool = True,
    ) -> None:
        self._bom_resolver = bom_resolver
        self._ledger = ledger
        self._clamp = clamp

    @abstractmethod
    def _reason(self, order: Order, set_id: int) -> str:
        """Ledger reason for a movement made for *set_id* on *order*."""

    def _move_for_order(self, order: Order) -> MovementReport:
        if order.id is None:
            raise ValueError("Order must be persisted before moving stock")

        report = MovementReport(order_id=order.id)
        for line in order.items:
            set_id = line.set_id
            if set_id is None:
                continue  # fee line
            try:
                requirements = self._bom_resolver.resolve(set_id, line.quantity.value)
            except Exception as exc:
                logger.exception(
                    "Could not resolve BOM for set {} on order {}",
                    set_id, order.order_number,
                )
                report.failures.append(MovementFailure(set_id, None, None, str(exc)))
                continue

            if not requirements:
                logger.warning(
                    "Set {} on order {} has no mandatory parts; nothing to {}",
                    set_id, order.order_number, self.verb,
                )

            for req in requirements:
                self._move_part(order, set_id, req, report)

        logger.info(
            "{} {} unit(s) in {} ledger entries for order {} ({} failures)",
            self.verb.capitalize(), report.units_moved, len(report.transactions),
            order.order_number, len(report.failures),
        )
        return report

    def _move_part(
        self,
        order: Order,
        set_id: int,
        req: PartRequirement,
        report: MovementReport,
    ) -> None:
        try:
            txn = self._ledger.apply_movement(
                part_id=req.part_id,
                transaction_type=self.transaction_type,
                quantity=req.quantity_needed,
                reason=self._reason(order, set_id),
                reference_id=order.id,
                reference_type=self.reference_type,
                clamp=self._clamp,
            )
        except Exception as exc:
            logger.exception(
                "Failed to {} {} unit(s) of part {} for order {} (set {})",
                self.verb, req.quantity_needed, req.part_id,
                order.order_number, set_id,
            )
            report.failures.append(
                MovementFailure(set_id, req.part_id, req.quantity_needed, str(exc))
            )
            return

        if txn is None:
            logger.warning(
                "Part {} already at zero; {} unit(s) for order {} not deducted",
                req.part_id, req.quantity_needed, order.order_number,
            )
            return

        self._log_movement(order, req, txn)
        report.transactions.append(txn)

    def _log_movement(
        self, order: Order, req: PartRequirement, txn: InventoryTransaction
    ) -> None:
        if txn.quantity < req.quantity_needed:
            logger.warning(
                "Part {} short by {} for order {}: stock clamped at zero",
                req.part_id, req.quantity_needed - txn.quantity, order.order_number,
            )
        logger.info(
            "Part {}: {} -> {} ({} {})",
            txn.part_id, txn.previous_stock, txn.new_stock,
            txn.transaction_type.value, txn.quantity,
        )
