"""Application service: Adjust Stock use case.

Manual corrections (stock counts, goods received, write-offs) go through
the same ledger as order movements so the audit trail stays complete.
A ``set`` adjustment hands the target level to the ledger, which works
out the delta from the stock it has locked.
"""

from __future__ import annotations

from kitstock.application.dto import StockAdjustmentDTO
from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.ledger import ReferenceType, TransactionType
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.logging_config import get_logger

logger = get_logger(__name__)

ADJUSTMENT_TYPES = ("add", "remove", "set")


class AdjustStockHandler:

    def __init__(self, part_repo: PartRepository, ledger: InventoryLedger) -> None:
        self._part_repo = part_repo
        self._ledger = ledger

    def handle(
        self,
        part_id: int,
        adjustment_type: str,
        quantity: int,
        reason: str = "",
    ) -> StockAdjustmentDTO:
        if adjustment_type not in ADJUSTMENT_TYPES:
            raise ValidationError(
                f"Invalid adjustment type '{adjustment_type}'. Use: add, remove, or set"
            )
        if adjustment_type == "set":
            if quantity < 0:
                raise ValidationError("Stock level cannot be negative")
        elif quantity <= 0:
            raise ValidationError("Adjustment quantity must be positive")

        if self._part_repo.get_by_id(part_id) is None:
            raise EntityNotFoundError(f"Part #{part_id} not found")

        if adjustment_type == "set":
            label = f"set to {quantity}"
            txn = self._ledger.set_stock_level(
                part_id=part_id,
                target=quantity,
                reason=reason or f"Manual adjustment ({label})",
                reference_id=None,
                reference_type=ReferenceType.MANUAL_ADJUSTMENT,
            )
        else:
            if adjustment_type == "add":
                direction, label = TransactionType.IN, f"+{quantity}"
            else:
                direction, label = TransactionType.OUT, f"-{quantity}"
            txn = self._ledger.apply_movement(
                part_id=part_id,
                transaction_type=direction,
                quantity=quantity,
                reason=reason or f"Manual adjustment ({label})",
                reference_id=None,
                reference_type=ReferenceType.MANUAL_ADJUSTMENT,
                clamp=False,
            )

        if txn is None:
            # Only a "set" to the level already on hand writes nothing.
            return StockAdjustmentDTO(part_id, quantity, quantity, label)

        logger.info(
            "Adjusted part {}: {} -> {} ({})",
            part_id, txn.previous_stock, txn.new_stock, label,
        )
        return StockAdjustmentDTO(part_id, txn.previous_stock, txn.new_stock, label)
