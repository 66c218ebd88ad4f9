"""Result types produced by BOM resolution, stock validation and
stock allocation/restoration."""

from __future__ import annotations

from dataclasses import dataclass, field

from kitstock.domain.model.ledger import InventoryTransaction


@dataclass(frozen=True)
class PartRequirement:
    """Whole units of one part needed for a (set, quantity) pair."""

    part_id: int
    quantity_needed: int


@dataclass(frozen=True)
class CartLine:
    """One line of a cart submitted for validation."""

    set_id: int | None
    quantity: int | None


@dataclass(frozen=True)
class InsufficientPart:
    part_id: int
    part_name: str
    required: int
    available: int

    @property
    def shortfall(self) -> int:
        return self.required - self.available

    def to_dict(self) -> dict:
        return {
            "part_id": self.part_id,
            "part_name": self.part_name,
            "required": self.required,
            "available": self.available,
            "shortfall": self.shortfall,
        }


@dataclass(frozen=True)
class LineValidation:
    set_id: int | None
    valid: bool
    parts_configured: bool
    insufficient_parts: list[InsufficientPart] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        raw: dict = {
            "set_id": self.set_id,
            "valid": self.valid,
            "parts_configured": self.parts_configured,
        }
        if self.insufficient_parts:
            raw["insufficient_parts"] = [p.to_dict() for p in self.insufficient_parts]
        if self.error:
            raw["error"] = self.error
        return raw


@dataclass(frozen=True)
class StockValidationReport:
    results: list[LineValidation]

    @property
    def valid(self) -> bool:
        return all(r.valid for r in self.results)

    @property
    def valid_items(self) -> int:
        return sum(1 for r in self.results if r.valid)

    @property
    def invalid_items(self) -> int:
        return len(self.results) - self.valid_items

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "results": [r.to_dict() for r in self.results],
            "summary": {
                "total_items": len(self.results),
                "valid_items": self.valid_items,
                "invalid_items": self.invalid_items,
            },
        }


@dataclass(frozen=True)
class MovementFailure:
    """A part (or whole line) whose stock movement did not happen."""

    set_id: int
    part_id: int | None
    quantity: int | None
    error: str


@dataclass
class MovementReport:
    """What an allocation or restoration pass actually did to stock."""

    order_id: int
    transactions: list[InventoryTransaction] = field(default_factory=list)
    failures: list[MovementFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def units_moved(self) -> int:
        return sum(t.quantity for t in self.transactions)
