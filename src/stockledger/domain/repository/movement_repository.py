"""Abstract repository for the inventory audit trail.

Insert-only: there is deliberately no save/update/delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.audit import InventoryMovement


class MovementRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique movement ID."""

    @abstractmethod
    def add(self, movement: InventoryMovement) -> None:
        """Append a movement to the trail."""

    @abstractmethod
    def list_for_variant(self, variant_id: str) -> list[InventoryMovement]:
        """Movements for one variant, oldest first."""

    @abstractmethod
    def list_for_reference(
        self, reference_type: str, reference_id: str
    ) -> list[InventoryMovement]:
        """Movements caused by one order (or adjustment), oldest first."""
