"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON and SQL
repositories but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

from datetime import datetime, timezone

from kitstock.domain.exceptions import EntityNotFoundError, ValidationError
from kitstock.domain.model.kit_set import KitSet
from kitstock.domain.model.ledger import (
    InventoryTransaction,
    ReferenceType,
    TransactionType,
    movement_to_level,
)
from kitstock.domain.model.order import Order
from kitstock.domain.model.part import Part
from kitstock.domain.repository.inventory_ledger import InventoryLedger
from kitstock.domain.repository.order_repository import OrderRepository
from kitstock.domain.repository.part_repository import PartRepository
from kitstock.domain.repository.set_repository import SetRepository


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1

    def next_id(self) -> int:
        return self._next_id

    def get_by_id(self, order_id: int) -> Order | None:
        return self._store.get(order_id)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._next_id
            self._next_id += 1
        self._store[order.id] = order


class FakePartRepository(PartRepository):

    def __init__(self, parts: list[Part] | None = None) -> None:
        self._store: dict[int, Part] = {}
        for p in parts or []:
            self._store[p.part_id] = p

    def next_id(self) -> int:
        return max(self._store, default=0) + 1

    def get_by_id(self, part_id: int) -> Part | None:
        return self._store.get(part_id)

    def list_all(self) -> list[Part]:
        return list(self._store.values())

    def add(self, part: Part) -> None:
        if part.part_id in self._store:
            raise ValidationError(f"Part #{part.part_id} already exists")
        self._store[part.part_id] = part


class FakeSetRepository(SetRepository):

    def __init__(self, sets: list[KitSet] | None = None) -> None:
        self._store: dict[int, KitSet] = {}
        for s in sets or []:
            self._store[s.set_id] = s

    def next_id(self) -> int:
        return max(self._store, default=0) + 1

    def get_by_id(self, set_id: int) -> KitSet | None:
        return self._store.get(set_id)

    def list_all(self) -> list[KitSet]:
        return list(self._store.values())

    def save(self, kit_set: KitSet) -> None:
        self._store[kit_set.set_id] = kit_set


class FakeInventoryLedger(InventoryLedger):
    """Moves stock on the Part objects held by a FakePartRepository."""

    def __init__(self, parts: FakePartRepository) -> None:
        self._parts = parts
        self.entries: list[InventoryTransaction] = []

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
        part = self._parts.get_by_id(part_id)
        if part is None:
            raise EntityNotFoundError(f"Part #{part_id} not found")

        previous = part.stock_quantity
        if transaction_type is TransactionType.OUT:
            moved = part.withdraw(quantity, clamp=clamp)
        else:
            part.restock(quantity)
            moved = quantity
        if moved == 0:
            return None

        txn = InventoryTransaction(
            transaction_id=len(self.entries) + 1,
            part_id=part_id,
            transaction_type=transaction_type,
            quantity=moved,
            reason=reason,
            reference_id=reference_id,
            reference_type=reference_type,
            previous_stock=previous,
            new_stock=part.stock_quantity,
            created_at=datetime.now(timezone.utc),
        )
        self.entries.append(txn)
        return txn

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
        part = self._parts.get_by_id(part_id)
        if part is None:
            raise EntityNotFoundError(f"Part #{part_id} not found")
        step = movement_to_level(part.stock_quantity, target)
        if step is None:
            return None
        transaction_type, quantity = step
        return self.apply_movement(
            part_id, transaction_type, quantity, reason, reference_id, reference_type,
            clamp=False,
        )

    def list_for_part(self, part_id: int) -> list[InventoryTransaction]:
        return [t for t in self.entries if t.part_id == part_id]

    def list_for_reference(
        self, reference_id: int, reference_type: ReferenceType
    ) -> list[InventoryTransaction]:
        return [
            t for t in self.entries
            if t.reference_id == reference_id and t.reference_type is reference_type
        ]


class FailingInventoryLedger(FakeInventoryLedger):
    """Raises for the listed part ids, behaves normally otherwise."""

    def __init__(self, parts: FakePartRepository, failing_part_ids: set[int]) -> None:
        super().__init__(parts)
        self._failing = failing_part_ids

    def apply_movement(self, part_id: int, *args, **kwargs) -> InventoryTransaction | None:
        if part_id in self._failing:
            raise RuntimeError(f"storage unavailable for part {part_id}")
        return super().apply_movement(part_id, *args, **kwargs)
