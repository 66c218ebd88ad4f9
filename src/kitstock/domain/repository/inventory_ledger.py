"""Abstract Part Ledger Store.

The ledger is the only path that mutates ``Part.stock_quantity``.
``apply_movement`` and ``set_stock_level`` perform read, compute, write
and ledger append for a single part as one unit, so a stock change can
never be persisted without its ledger entry and two concurrent movements
on the same part cannot overwrite each other. Movements on *different*
parts are independent; there is no multi-part transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.ledger import (
    InventoryTransaction,
    ReferenceType,
    TransactionType,
)


class InventoryLedger(ABC):

    @abstractmethod
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
        """Move stock for one part and append the matching ledger entry.

        ``OUT`` with ``clamp`` floors the stock at zero and records only the
        units actually removed; nothing is written (and None is returned)
        when no unit could be removed. ``OUT`` without ``clamp`` raises
        InsufficientStockError instead. Raises EntityNotFoundError for an
        unknown part.
        """

    @abstractmethod
    def list_for_part(self, part_id: int) -> list[InventoryTransaction]:
        """Return a part's ledger entries, oldest first."""

    @abstractmethod
    def list_for_reference(
        self, reference_id: int, reference_type: ReferenceType
    ) -> list[InventoryTransaction]:
        """Return entries written on behalf of one order/adjustment, oldest first."""

    @abstractmethod
    def set_stock_level(
        self,
        part_id: int,
        target: int,
        reason: str,
        reference_id: int | None,
        reference_type: ReferenceType,
    ) -> InventoryTransaction | None:
        """Move a part's stock to exactly *target* with one ledger entry.

        The delta is computed from the stock read inside the same unit of
        work as the write. Returns None (and writes nothing) when the part
        is already at *target*.
        """
