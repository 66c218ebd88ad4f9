"""Domain service: Stock Validator.

Read-only pre-checkout gate. It compares each cart line's resolved BOM
against current stock and reports shortfalls. It reserves nothing and
locks nothing: a cart that validates can still fail to find stock a
moment later if another order is allocated in between.
"""

from __future__ import annotations

from kitstock.domain.model.stock_check import (
    CartLine,
    InsufficientPart,
    LineValidation,
    StockValidationReport,
)
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.service.bom_resolver import BomResolver
from kitstock.logging_config import get_logger

logger = get_logger(__name__)

NO_PARTS_CONFIGURED = "No parts configured for this set"


class StockValidator:

    def __init__(
        self,
        bom_resolver: BomResolver,
        part_repo: PartRepository,
        fee_set_id: int = -1,
    ) -> None:
        self._bom_resolver = bom_resolver
        self._part_repo = part_repo
        self._fee_set_id = fee_set_id

    def validate(self, lines: list[CartLine]) -> StockValidationReport:
        results = [self._validate_line(line) for line in lines]
        report = StockValidationReport(results=results)
        logger.debug(
            "Validated {} cart line(s): {} valid, {} invalid",
            len(results), report.valid_items, report.invalid_items,
        )
        return report

    def _validate_line(self, line: CartLine) -> LineValidation:
        if line.set_id is None or line.quantity is None:
            return LineValidation(
                set_id=line.set_id,
                valid=False,
                parts_configured=False,
                error="Missing set_id or quantity",
            )
        if line.quantity <= 0:
            return LineValidation(
                set_id=line.set_id,
                valid=False,
                parts_configured=False,
                error="Quantity must be positive",
            )

        # Fee lines carry no parts.
        if line.set_id == self._fee_set_id:
            return LineValidation(set_id=line.set_id, valid=True, parts_configured=True)

        kit_set = self._bom_resolver.get_set(line.set_id)
        if kit_set is None or not kit_set.has_parts_configured:
            return LineValidation(
                set_id=line.set_id,
                valid=False,
                parts_configured=False,
                error=NO_PARTS_CONFIGURED,
            )

        insufficient: list[InsufficientPart] = []
        for req in BomResolver.resolve_set(kit_set, line.quantity):
            part = self._part_repo.get_by_id(req.part_id)
            available = part.stock_quantity if part is not None else 0
            if available < req.quantity_needed:
                insufficient.append(
                    InsufficientPart(
                        part_id=req.part_id,
                        part_name=part.display_name if part is not None else f"Part #{req.part_id}",
                        required=req.quantity_needed,
                        available=available,
                    )
                )

        return LineValidation(
            set_id=line.set_id,
            valid=not insufficient,
            parts_configured=True,
            insufficient_parts=insufficient,
        )
