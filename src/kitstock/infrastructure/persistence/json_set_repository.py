"""JSON-file-backed implementation of SetRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from kitstock.domain.model.kit_set import BomEntry, KitSet
from kitstock.domain.repository.set_repository import SetRepository
from kitstock.infrastructure.persistence.json_file import JsonFile


class JsonSetRepository(SetRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- SetRepository interface ----------------------------------------------

    def next_id(self) -> int:
        return self._file.next_id("set_id")

    def get_by_id(self, set_id: int) -> KitSet | None:
        for raw in self._file.load():
            if raw["set_id"] == set_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[KitSet]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, kit_set: KitSet) -> None:
        records = self._file.load()
        replaced = False
        for i, raw in enumerate(records):
            if raw["set_id"] == kit_set.set_id:
                records[i] = self._to_raw(kit_set)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(kit_set))
        self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(kit_set: KitSet) -> dict:
        return {
            "set_id": kit_set.set_id,
            "name": kit_set.name,
            "parts": [
                {
                    "part_id": entry.part_id,
                    "quantity": str(entry.quantity),
                    "is_optional": entry.is_optional,
                }
                for entry in kit_set.bom
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> KitSet:
        return KitSet(
            set_id=raw["set_id"],
            name=raw["name"],
            bom=[
                BomEntry(
                    part_id=p["part_id"],
                    quantity=Decimal(str(p["quantity"])),
                    is_optional=bool(p.get("is_optional", False)),
                )
                for p in raw.get("parts", [])
            ],
        )
