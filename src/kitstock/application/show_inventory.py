"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.repository.part_repository import PartRepository


@dataclass(frozen=True)
class InventoryLineDTO:
    part_id: int
    part_name: str
    stock: int
    minimum: int
    is_low_stock: bool
    is_out_of_stock: bool


@dataclass(frozen=True)
class InventorySummaryDTO:
    lines: list[InventoryLineDTO]

    @property
    def total_parts(self) -> int:
        return len(self.lines)

    @property
    def total_stock(self) -> int:
        return sum(line.stock for line in self.lines)

    @property
    def low_stock_count(self) -> int:
        return sum(1 for line in self.lines if line.is_low_stock)

    @property
    def out_of_stock_count(self) -> int:
        return sum(1 for line in self.lines if line.is_out_of_stock)


class ShowInventoryHandler:

    def __init__(self, part_repo: PartRepository) -> None:
        self._part_repo = part_repo

    def handle(self) -> InventorySummaryDTO:
        parts = sorted(self._part_repo.list_all(), key=lambda p: p.display_name.lower())
        return InventorySummaryDTO(
            lines=[
                InventoryLineDTO(
                    part_id=part.part_id,
                    part_name=part.display_name,
                    stock=part.stock_quantity,
                    minimum=part.minimum_stock_level,
                    is_low_stock=part.is_low_stock,
                    is_out_of_stock=part.is_out_of_stock,
                )
                for part in parts
            ]
        )
