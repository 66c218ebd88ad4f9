"""Application service: Validate Stock use case (query).

Pre-checkout availability check for a cart. Advisory only: nothing is
reserved, so the answer can be stale by the time the order is placed.
"""

from __future__ import annotations

from kitstock.domain.model.stock_check import CartLine, StockValidationReport
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.domain.service.bom_resolver import BomResolver
from kitstock.domain.service.stock_validator import StockValidator


class ValidateStockHandler:

    def __init__(
        self,
        set_repo: SetRepository,
        part_repo: PartRepository,
        fee_set_id: int = -1,
    ) -> None:
        self._set_repo = set_repo
        self._part_repo = part_repo
        self._fee_set_id = fee_set_id

    def handle(self, lines: list[CartLine]) -> StockValidationReport:
        validator = StockValidator(
            BomResolver(self._set_repo), self._part_repo, fee_set_id=self._fee_set_id
        )
        return validator.validate(lines)
