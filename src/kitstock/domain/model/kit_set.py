"""KitSet aggregate and its bill of materials."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_CEILING, Decimal

from kitstock.domain.exceptions import ValidationError

# Every store keeps BOM quantities at this many decimal places.
BOM_QUANTITY_PLACES = 4
_BOM_QUANTUM = Decimal(1).scaleb(-BOM_QUANTITY_PLACES)


@dataclass(frozen=True)
class BomEntry:
    """Units of one part needed per unit of a set.

    Optional entries are informational only: they are never reserved
    and never restored.
    """

    part_id: int
    quantity: Decimal
    is_optional: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, Decimal):
            object.__setattr__(self, "quantity", Decimal(str(self.quantity)))
        if not self.quantity.is_finite():
            raise ValidationError(
                f"BOM quantity for part #{self.part_id} must be a number"
            )
        if self.quantity < 0:
            raise ValidationError(
                f"BOM quantity for part #{self.part_id} cannot be negative"
            )
        if self.quantity.quantize(_BOM_QUANTUM, rounding=ROUND_CEILING) != self.quantity:
            raise ValidationError(
                f"BOM quantity for part #{self.part_id} allows at most "
                f"{BOM_QUANTITY_PLACES} decimal places, got {self.quantity}"
            )

    @property
    def is_mandatory(self) -> bool:
        return not self.is_optional and self.quantity > 0


@dataclass
class KitSet:
    """A sellable kit assembled from parts.

    BOM entries keep their listing order; parts are processed in that order.
    """

    set_id: int
    name: str
    bom: list[BomEntry] = field(default_factory=list)

    @staticmethod
    def define(set_id: int, name: str, bom: list[BomEntry]) -> KitSet:
        """Create a set, rejecting a BOM that lists the same part twice."""
        if not name or not name.strip():
            raise ValidationError("Set name is required")
        seen: set[int] = set()
        for entry in bom:
            if entry.part_id in seen:
                raise ValidationError(
                    f"Part #{entry.part_id} is listed more than once in the BOM"
                )
            seen.add(entry.part_id)
        return KitSet(set_id=set_id, name=name.strip(), bom=list(bom))

    @property
    def has_parts_configured(self) -> bool:
        return bool(self.bom)

    @property
    def mandatory_entries(self) -> list[BomEntry]:
        return [entry for entry in self.bom if entry.is_mandatory]
