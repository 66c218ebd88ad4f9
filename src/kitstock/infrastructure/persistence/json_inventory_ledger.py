"""JSON-file-backed implementation of InventoryLedger.

Stock lives in the parts file, entries in the transactions file. A
process-wide lock makes each movement's read, write and append one step
for every ledger instance in the process; separate processes sharing the
same files are not coordinated.

The part is written first. If appending the entry then fails, the part's
previous record is written back before the error propagates.
"""

from __future__ import annotations

import dataclasses
import threading
from datetime import datetime, timezone
from pathlib import Path

from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.ledger import (
    InventoryTransaction,
    ReferenceType,
    TransactionType,
    movement_to_level,
)
from kitstock.domain.model.part import Part
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.infrastructure.persistence.json_file import JsonFile
from kitstock.infrastructure.persistence.json_part_repository import (
    JsonPartRepository,
)
from kitstock.logging_config import get_logger

logger = get_logger(__name__)

_MOVEMENT_LOCK = threading.Lock()


class JsonInventoryLedger(InventoryLedger):

    def __init__(self, parts_path: Path, transactions_path: Path) -> None:
        self._parts = JsonPartRepository(parts_path)
        self._file = JsonFile(transactions_path)

    # --- InventoryLedger interface --------------------------------------------

    def apply_movement(
        self,
        part_id: int,
        transaction_type: TransactionType,
        quantity: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
        clamp: bool = True,
    ) -> InventoryTransaction | None:
        if quantity <= 0:
            raise ValidationError("Movement quantity must be positive")

        with _MOVEMENT_LOCK:
            part = self._load_part(part_id)
            return self._move(
                part, transaction_type, quantity, reason, reference_id, reference_type, clamp
            )

    def set_stock_level(
        self,
        part_id: int,
        target: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
    ) -> InventoryTransaction | None:
        if target < 0:
            raise ValidationError("Stock level cannot be negative")

        with _MOVEMENT_LOCK:
            part = self._load_part(part_id)
            step = movement_to_level(part.stock_quantity, target)
            if step is None:
                return None
            transaction_type, quantity = step
            return self._move(
                part, transaction_type, quantity, reason, reference_id, reference_type, False
            )

    def list_for_part(self, part_id: int) -> list[InventoryTransaction]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["part_id"] == part_id
        ]

    def list_for_reference(
        self, reference_id: int, reference_type: ReferenceType
    ) -> list[InventoryTransaction]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["reference_id"] == reference_id
            and raw["reference_type"] == reference_type.value
        ]

    # --- Movement (caller holds the lock) -------------------------------------

    def _load_part(self, part_id: int) -> Part:
        part = self._parts.get_by_id(part_id)
        if part is None:
            raise EntityNotFoundError(f"Part #{part_id} not found")
        return part

    def _move(
        self,
        part: Part,
        transaction_type: TransactionType,
        quantity: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
        clamp: bool,
    ) -> InventoryTransaction | None:
        before = dataclasses.replace(part)
        if transaction_type is TransactionType.OUT:
            moved = part.withdraw(quantity, clamp=clamp)
        else:
            part.restock(quantity)
            moved = quantity
        if moved == 0:
            return None

        records = self._file.load()
        txn = InventoryTransaction(
            transaction_id=max((r["transaction_id"] for r in records), default=0) + 1,
            part_id=part.part_id,
            transaction_type=transaction_type,
            quantity=moved,
            reason=reason,
            reference_id=reference_id,
            reference_type=reference_type,
            previous_stock=before.stock_quantity,
            new_stock=part.stock_quantity,
            created_at=datetime.now(timezone.utc),
        )
        records.append(self._to_raw(txn))

        self._parts.overwrite(part)
        try:
            self._file.persist(records)
        except Exception:
            logger.error(
                "Could not append to {}; putting part {} back to {}",
                self._file.path, part.part_id, before.stock_quantity,
            )
            self._parts.overwrite(before)
            raise
        return txn

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(txn: InventoryTransaction) -> dict:
        return {
            "transaction_id": txn.transaction_id,
            "part_id": txn.part_id,
            "transaction_type": txn.transaction_type.value,
            "quantity": txn.quantity,
            "reason": txn.reason,
            "reference_id": txn.reference_id,
            "reference_type": txn.reference_type.value,
            "previous_stock": txn.previous_stock,
            "new_stock": txn.new_stock,
            "created_at": txn.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryTransaction:
        return InventoryTransaction(
            transaction_id=raw["transaction_id"],
            part_id=raw["part_id"],
            transaction_type=TransactionType(raw["transaction_type"]),
            quantity=raw["quantity"],
            reason=raw["reason"],
            reference_id=raw.get("reference_id"),
            reference_type=ReferenceType(raw["reference_type"]),
            previous_stock=raw.get("previous_stock", 0),
            new_stock=raw.get("new_stock", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
