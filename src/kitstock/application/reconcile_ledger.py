"""Application service: Reconcile Ledger use case (query).

For every part, rebuilds the expected stock from its baseline plus the
signed ledger total and compares it with the stored stock. Any non-zero
drift means a stock change happened without a ledger entry (or the
reverse) and needs an auditor's attention.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.model.ledger import net_movement
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReconciliationLineDTO:
    part_id: int
    part_name: str
    baseline: int
    ledger_net: int
    actual: int

    @property
    def expected(self) -> int:
        return self.baseline + self.ledger_net

    @property
    def drift(self) -> int:
        return self.actual - self.expected

    @property
    def consistent(self) -> bool:
        return self.drift == 0


class ReconcileLedgerHandler:

    def __init__(self, part_repo: PartRepository, ledger: InventoryLedger) -> None:
        self._part_repo = part_repo
        self._ledger = ledger

    def handle(self) -> list[ReconciliationLineDTO]:
        lines = []
        for part in self._part_repo.list_all():
            line = ReconciliationLineDTO(
                part_id=part.part_id,
                part_name=part.display_name,
                baseline=part.baseline_quantity,
                ledger_net=net_movement(self._ledger.list_for_part(part.part_id)),
                actual=part.stock_quantity,
            )
            if not line.consistent:
                logger.warning(
                    "Ledger drift on part {}: expected {}, found {}",
                    part.part_id, line.expected, line.actual,
                )
            lines.append(line)
        return lines
