"""Application service: Add Part use case."""

from __future__ import annotations

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.part import Part
from kitstock.domain.repository.part_repository import PartRepository


class AddPartHandler:

    def __init__(self, part_repo: PartRepository) -> None:
        self._part_repo = part_repo

    def handle(
        self,
        name: str,
        opening_stock: int = 0,
        minimum_stock_level: int = 0,
        part_number: str | None = None,
    ) -> Part:
        """Register a part; its opening stock becomes the ledger baseline."""
        if opening_stock < 0:
            raise ValidationError("Opening stock cannot be negative")
        if part_number and any(
            p.part_number == part_number for p in self._part_repo.list_all()
        ):
            raise ValidationError(f"Part number '{part_number}' already exists")

        part = Part.register(
            part_id=self._part_repo.next_id(),
            name=name,
            opening_stock=opening_stock,
            minimum_stock_level=minimum_stock_level,
            part_number=part_number,
        )
        self._part_repo.add(part)
        return part
