"""Domain service: Stock Ledger.

Owns the single mutation primitive every order operation goes through,
``apply_delta``, plus the availability check that must run before it.
Manual stock adjustments (restocks, write-offs, stock counts) also live
here because they touch the same counters and the same audit trail.
"""

from __future__ import annotations

from enum import Enum

import structlog

from stockledger.domain.exceptions import (
    InsufficientInventory,
    ValidationError,
    VariantStockNotFound,
)
from stockledger.domain.model.audit import InventoryMovement, MovementKind, ReferenceType
from stockledger.domain.model.inventory import StockChange, StockRow
from stockledger.domain.repository.inventory_repository import InventoryRepository
from stockledger.domain.service.audit_trail import AuditTrail

logger = structlog.get_logger(__name__)


class AdjustmentMode(Enum):
    ADD = "add"
    REMOVE = "remove"
    SET = "set"


class StockLedger:

    def __init__(self, inventory: InventoryRepository, audit: AuditTrail) -> None:
        self._inventory = inventory
        self._audit = audit

    # --- Reads ----------------------------------------------------------------

    def find(self, variant_id: str) -> StockRow | None:
        return self._inventory.get(variant_id)

    def require(self, variant_id: str, title: str | None = None) -> StockRow:
        row = self._inventory.get(variant_id)
        if row is None:
            raise VariantStockNotFound(variant_id, title)
        return row

    @staticmethod
    def ensure_available(row: StockRow, required: int, title: str) -> None:
        """Raise InsufficientInventory unless ``required`` units are sellable.

        Uses the recomputed figure rather than the stored ``available`` copy.
        """
        available = row.sellable
        if available < required:
            raise InsufficientInventory(title, available=available, required=required)

    # --- The mutation primitive -----------------------------------------------

    def apply_delta(
        self,
        variant_id: str,
        reserved_delta: int = 0,
        committed_delta: int = 0,
        on_hand_delta: int = 0,
    ) -> StockChange:
        """Load, shift and persist one row; return its before/after snapshots.

        Does not check availability; callers do that first.
        """
        row = self.require(variant_id)
        change = row.apply_delta(
            reserved_delta=reserved_delta,
            committed_delta=committed_delta,
            on_hand_delta=on_hand_delta,
        )
        self._inventory.save(row)
        logger.debug(
            "Stock row updated",
            variant_id=variant_id,
            reserved_delta=reserved_delta,
            committed_delta=committed_delta,
            on_hand_delta=on_hand_delta,
            available=change.new.available,
        )
        return change

    # --- Manual adjustments ---------------------------------------------------

    def adjust(
        self,
        variant_id: str,
        mode: AdjustmentMode,
        quantity: int,
        product_id: str | None = None,
        reason: str | None = None,
        user_id: str | None = None,
    ) -> InventoryMovement | None:
        """Change on-hand by hand and audit it.

        ``add`` and ``set`` create the row when the variant has none yet.
        ``remove`` never takes on-hand below zero.  Returns None when the
        adjustment turns out to be a no-op.
        """
        if quantity < 0:
            raise ValidationError("Adjustment quantity cannot be negative")

        row = self._inventory.get(variant_id)
        if row is None:
            if mode == AdjustmentMode.REMOVE:
                raise VariantStockNotFound(variant_id)
            row = StockRow(variant_id=variant_id, on_hand=0, product_id=product_id)
            self._inventory.save(row)
        elif product_id and row.product_id is None:
            row.product_id = product_id
            self._inventory.save(row)

        if mode == AdjustmentMode.ADD:
            delta = quantity
        elif mode == AdjustmentMode.REMOVE:
            delta = -min(quantity, row.on_hand)
        else:
            delta = quantity - row.on_hand

        if delta == 0:
            return None

        change = self.apply_delta(variant_id, on_hand_delta=delta)
        kind = MovementKind.RESTOCK if delta > 0 else MovementKind.ADJUSTMENT_DECREASE
        movement = self._audit.record(
            change,
            kind=kind,
            quantity=delta,
            reason=reason or f"Manual {mode.value} adjustment",
            reference_type=ReferenceType.ADJUSTMENT,
            reference_id=None,
            user_id=user_id,
        )
        logger.info(
            "Stock adjusted",
            variant_id=variant_id,
            mode=mode.value,
            on_hand=change.new.on_hand,
            available=change.new.available,
        )
        return movement
