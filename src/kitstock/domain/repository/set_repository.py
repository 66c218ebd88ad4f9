"""Abstract repository for the KitSet aggregate (sets and their BOMs)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from kitstock.domain.model.kit_set import KitSet


class SetRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique set ID."""

    @abstractmethod
    def get_by_id(self, set_id: int) -> KitSet | None:
        """Return a set with its BOM, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[KitSet]:
        """Return every set."""

    @abstractmethod
    def save(self, kit_set: KitSet) -> None:
        """Persist a new or updated set, replacing its BOM."""
