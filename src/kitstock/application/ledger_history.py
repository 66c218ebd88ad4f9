"""Application service: Ledger History use case (query)."""

from __future__ import annotations

from kitstock.application._mapping import transaction_to_dto
from kitstock.application.dto import LedgerEntryDTO
from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.part_repository import PartRepository


class LedgerHistoryHandler:

    def __init__(self, ledger: InventoryLedger, part_repo: PartRepository) -> None:
        self._ledger = ledger
        self._part_repo = part_repo

    def handle(
        self,
        part_id: int,
        limit: int | None = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> list[LedgerEntryDTO]:
        """Return a part's ledger entries in chronological order (or reversed)."""
        if offset < 0:
            raise ValidationError("Offset cannot be negative")
        if limit is not None and limit < 0:
            raise ValidationError("Limit cannot be negative")
        if self._part_repo.get_by_id(part_id) is None:
            raise EntityNotFoundError(f"Part #{part_id} not found")

        entries = self._ledger.list_for_part(part_id)
        if newest_first:
            entries = list(reversed(entries))
        entries = entries[offset:]
        if limit is not None:
            entries = entries[:limit]
        return [transaction_to_dto(t) for t in entries]
