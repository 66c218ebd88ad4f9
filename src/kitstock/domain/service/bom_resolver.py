"""Domain service: BOM Resolver.

Expands a (set, quantity) pair into whole-unit part requirements.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal

from kitstock.domain.exceptions import ValidationError
from kitstock.domain.model.kit_set import KitSet
from kitstock.domain.model.stock_check import PartRequirement
from kitstock.domain.repository.set_repository import SetRepository


def units_needed(order_quantity: int, bom_quantity: Decimal) -> int:
    """``ceil(order_quantity * bom_quantity)`` so partial units never under-reserve."""
    product = Decimal(order_quantity) * Decimal(str(bom_quantity))
    return int(product.to_integral_value(rounding=ROUND_CEILING))


class BomResolver:

    def __init__(self, set_repo: SetRepository) -> None:
        self._set_repo = set_repo

    def get_set(self, set_id: int) -> KitSet | None:
        return self._set_repo.get_by_id(set_id)

    def resolve(self, set_id: int, order_quantity: int) -> list[PartRequirement]:
        """Return the mandatory part requirements for *order_quantity* units.

        Optional BOM entries are skipped. An unknown set, or a set with no
        mandatory entries, resolves to an empty list.
        """
        kit_set = self._set_repo.get_by_id(set_id)
        if kit_set is None:
            return []
        return self.resolve_set(kit_set, order_quantity)

    @staticmethod
    def resolve_set(kit_set: KitSet, order_quantity: int) -> list[PartRequirement]:
        if order_quantity <= 0:
            raise ValidationError("Order quantity must be positive")
        return [
            PartRequirement(
                part_id=entry.part_id,
                quantity_needed=units_needed(order_quantity, entry.quantity),
            )
            for entry in kit_set.mandatory_entries
        ]
