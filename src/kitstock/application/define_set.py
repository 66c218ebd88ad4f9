"""Application service: Define Set use case.

Creates a set together with its bill of materials. Every BOM line must
reference an existing part.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.repository.set_repository import SetRepository


@dataclass(frozen=True)
class BomLineSpec:
    part_id: int
    quantity: str | Decimal
    is_optional: bool = False


class DefineSetHandler:

    def __init__(self, set_repo: SetRepository, part_repo: PartRepository) -> None:
        self._set_repo = set_repo
        self._part_repo = part_repo

    def handle(self, name: str, bom: list[BomLineSpec]) -> KitSet:
        entries = []
        for line in bom:
            if self._part_repo.get_by_id(line.part_id) is None:
                raise EntityNotFoundError(f"Part #{line.part_id} not found")
            try:
                quantity = Decimal(str(line.quantity))
            except InvalidOperation as exc:
                raise ValidationError(
                    f"Invalid BOM quantity {line.quantity!r} for part #{line.part_id}"
                ) from exc
            entries.append(BomEntry(line.part_id, quantity, line.is_optional))

        kit_set = KitSet.define(self._set_repo.next_id(), name, entries)
        self._set_repo.save(kit_set)
        return kit_set
