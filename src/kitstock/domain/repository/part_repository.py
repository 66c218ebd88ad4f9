"""Abstract repository for the Part aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Stock quantities are changed through the
InventoryLedger, not by saving a Part.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.part import Part


class PartRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique part ID."""

    @abstractmethod
    def get_by_id(self, part_id: int) -> Part | None:
        """Return a part by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Part]:
        """Return every part."""

    @abstractmethod
    def add(self, part: Part) -> None:
        """Persist a newly registered part."""
