"""JSON-document-backed implementation of MovementRepository.

Records go into the ``inventory_tracking`` table and are only ever appended.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from stockledger.domain.model.audit import InventoryMovement, MovementKind, ReferenceType
from stockledger.domain.repository.movement_repository import MovementRepository


class JsonMovementRepository(MovementRepository):

    def __init__(self, document: dict[str, Any]) -> None:
        self._records: list[dict] = document.setdefault("inventory_tracking", [])

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(m["id"] for m in self._records) + 1

    def add(self, movement: InventoryMovement) -> None:
        self._records.append(self._to_raw(movement))

    def list_for_variant(self, variant_id: str) -> list[InventoryMovement]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if raw["variant_id"] == variant_id
        ]

    def list_for_reference(
        self, reference_type: str, reference_id: str
    ) -> list[InventoryMovement]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if raw["reference_type"] == reference_type
            and raw["reference_id"] == reference_id
        ]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(movement: InventoryMovement) -> dict:
        return {
            "id": movement.id,
            "variant_id": movement.variant_id,
            "product_id": movement.product_id,
            "type": movement.kind.value,
            "quantity": movement.quantity,
            "previous_available": movement.previous_available,
            "previous_reserved": movement.previous_reserved,
            "new_available": movement.new_available,
            "new_reserved": movement.new_reserved,
            "reason": movement.reason,
            "reference_type": movement.reference_type.value,
            "reference_id": movement.reference_id,
            "user_id": movement.user_id,
            "created_at": movement.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryMovement:
        return InventoryMovement(
            id=raw["id"],
            variant_id=raw["variant_id"],
            product_id=raw.get("product_id"),
            kind=MovementKind(raw["type"]),
            quantity=raw["quantity"],
            previous_available=raw["previous_available"],
            previous_reserved=raw["previous_reserved"],
            new_available=raw["new_available"],
            new_reserved=raw["new_reserved"],
            reason=raw["reason"],
            reference_type=ReferenceType(raw["reference_type"]),
            reference_id=raw.get("reference_id"),
            user_id=raw.get("user_id"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
