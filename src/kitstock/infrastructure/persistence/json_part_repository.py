"""JSON-file-backed implementation of PartRepository."""

from __future__ import annotations

from pathlib import Path

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.part import Part
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.infrastructure.persistence.json_file import JsonFile


class JsonPartRepository(PartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- PartRepository interface ---------------------------------------------

    def next_id(self) -> int:
        return self._file.next_id("part_id")

    def get_by_id(self, part_id: int) -> Part | None:
        for raw in self._file.load():
            if raw["part_id"] == part_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Part]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def add(self, part: Part) -> None:
        records = self._file.load()
        if any(raw["part_id"] == part.part_id for raw in records):
            raise ValidationError(f"Part #{part.part_id} already exists")
        records.append(self._to_raw(part))
        self._file.persist(records)

    # --- Stock writes (InventoryLedger only) ----------------------------------

    def overwrite(self, part: Part) -> None:
        records = self._file.load()
        for i, raw in enumerate(records):
            if raw["part_id"] == part.part_id:
                records[i] = self._to_raw(part)
                break
        self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(part: Part) -> dict:
        return {
            "part_id": part.part_id,
            "name": part.name,
            "part_number": part.part_number,
            "stock_quantity": part.stock_quantity,
            "minimum_stock_level": part.minimum_stock_level,
            "baseline_quantity": part.baseline_quantity,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Part:
        return Part(
            part_id=raw["part_id"],
            name=raw["name"],
            part_number=raw.get("part_number"),
            stock_quantity=raw.get("stock_quantity", 0),
            minimum_stock_level=raw.get("minimum_stock_level", 0),
            baseline_quantity=raw.get("baseline_quantity", 0),
        )
