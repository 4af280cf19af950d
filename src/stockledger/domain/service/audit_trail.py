"""Domain service: Audit Trail Writer.

Turns the before/after pair of a ledger mutation into an append-only
InventoryMovement.  One call per mutation, never more, never fewer.
"""

from __future__ import annotations

from stockledger.domain.model.audit import InventoryMovement, MovementKind, ReferenceType
from stockledger.domain.model.inventory import StockChange
from stockledger.domain.repository.movement_repository import MovementRepository


class AuditTrail:

    def __init__(self, movements: MovementRepository) -> None:
        self._movements = movements

    def record(
        self,
        change: StockChange,
        kind: MovementKind,
        quantity: int,
        reason: str,
        reference_type: ReferenceType,
        reference_id: str | None,
        user_id: str | None = None,
        product_id: str | None = None,
    ) -> InventoryMovement:
        movement = InventoryMovement(
            id=self._movements.next_id(),
            variant_id=change.variant_id,
            product_id=product_id or change.product_id,
            kind=kind,
            quantity=quantity,
            previous_available=change.previous.available,
            previous_reserved=change.previous.reserved,
            new_available=change.new.available,
            new_reserved=change.new.reserved,
            reason=reason,
            reference_type=reference_type,
            reference_id=reference_id,
            user_id=user_id,
        )
        self._movements.add(movement)
        return movement
