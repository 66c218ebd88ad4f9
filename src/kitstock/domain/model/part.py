"""Part aggregate: on-hand stock for one inventoried component.

Stock only changes through ``withdraw()`` / ``restock()``, and callers
outside the domain reach those exclusively via the inventory ledger so every
change is paired with a ledger entry.
"""

from __future__ import annotations

from dataclasses import dataclass

from kitstock.domain.exceptions import InsufficientStockError, ValidationError


@dataclass
class Part:
    """Aggregate root for a stocked part.

    Invariants:
    - ``stock_quantity`` is never negative
    - ``baseline_quantity`` is the stock on hand when the part was
      registered; it never changes afterwards
    """

    part_id: int
    name: str
    stock_quantity: int = 0
    minimum_stock_level: int = 0
    part_number: str | None = None
    baseline_quantity: int = 0

    def __post_init__(self) -> None:
        if self.stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        if self.minimum_stock_level < 0:
            raise ValidationError("Minimum stock level cannot be negative")

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def register(
        part_id: int,
        name: str,
        opening_stock: int = 0,
        minimum_stock_level: int = 0,
        part_number: str | None = None,
    ) -> Part:
        """Create a new part whose opening stock becomes its ledger baseline."""
        if not name or not name.strip():
            raise ValidationError("Part name is required")
        return Part(
            part_id=part_id,
            name=name.strip(),
            stock_quantity=opening_stock,
            minimum_stock_level=minimum_stock_level,
            part_number=part_number,
            baseline_quantity=opening_stock,
        )

    # --- Stock movements ------------------------------------------------------

    def withdraw(self, quantity: int, clamp: bool = True) -> int:
        """Remove *quantity* units and return how many were actually removed.

        With ``clamp`` the stock floors at zero and the deficit is absorbed;
        without it an over-withdrawal raises InsufficientStockError.
        """
        if quantity <= 0:
            raise ValidationError("Withdrawal quantity must be positive")
        if quantity > self.stock_quantity and not clamp:
            raise InsufficientStockError(self.part_id, quantity, self.stock_quantity)
        removed = min(quantity, self.stock_quantity)
        self.stock_quantity -= removed
        return removed

    def restock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock_quantity += quantity

    # --- Computed properties --------------------------------------------------

    @property
    def display_name(self) -> str:
        return self.name or self.part_number or f"Part #{self.part_id}"

    @property
    def is_low_stock(self) -> bool:
        return self.minimum_stock_level > 0 and self.stock_quantity <= self.minimum_stock_level

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity == 0
