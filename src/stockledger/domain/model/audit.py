"""InventoryMovement: one append-only audit record per ledger mutation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class MovementKind(Enum):
    RESERVATION = "reservation"
    CANCELLATION = "cancellation"
    FULFILLMENT = "fulfillment"
    RESTOCK = "restock"
    ADJUSTMENT_DECREASE = "adjustment_decrease"


class ReferenceType(Enum):
    ORDER = "order"
    ADJUSTMENT = "adjustment"


@dataclass(frozen=True)
class InventoryMovement:
    """Forensic record of how a stock row changed.

    Frozen on purpose: records are inserted once and never edited.
    ``quantity`` is signed (negative when stock is released or consumed).
    """

    id: int
    variant_id: str
    kind: MovementKind
    quantity: int
    previous_available: int
    previous_reserved: int
    new_available: int
    new_reserved: int
    reason: str
    reference_type: ReferenceType
    reference_id: str | None = None
    product_id: str | None = None
    user_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
