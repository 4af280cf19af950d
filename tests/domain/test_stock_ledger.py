"""Unit tests for the StockLedger domain service (manual adjustments)."""

import pytest

from stockledger.domain.exceptions import (
    InsufficientInventory,
    ValidationError,
    VariantStockNotFound,
)
from stockledger.domain.model.audit import MovementKind, ReferenceType
from stockledger.domain.model.inventory import StockRow
from stockledger.domain.service.audit_trail import AuditTrail
from stockledger.domain.service.stock_ledger import AdjustmentMode, StockLedger
from tests.fakes import FakeInventoryRepository, FakeMovementRepository


def _ledger(*rows: StockRow):
    inventory = FakeInventoryRepository(list(rows))
    movements = FakeMovementRepository()
    return StockLedger(inventory, AuditTrail(movements)), inventory, movements


class TestEnsureAvailable:

    def test_uses_recomputed_availability(self):
        row = StockRow(variant_id="v1", on_hand=10, reserved=4, committed=4, available=10)
        with pytest.raises(InsufficientInventory, match="Available: 2, Required: 3"):
            StockLedger.ensure_available(row, 3, "Tee")

    def test_exact_fit_allowed(self):
        row = StockRow(variant_id="v1", on_hand=3)
        StockLedger.ensure_available(row, 3, "Tee")


class TestApplyDelta:

    def test_persists_row(self):
        ledger, inventory, _ = _ledger(StockRow(variant_id="v1", on_hand=10))
        change = ledger.apply_delta("v1", reserved_delta=1, committed_delta=1)

        assert change.new.available == 8
        assert inventory.get("v1").available == 8

    def test_missing_row(self):
        ledger, _, _ = _ledger()
        with pytest.raises(VariantStockNotFound, match="variant v9"):
            ledger.apply_delta("v9", reserved_delta=1)


class TestAdjust:

    def test_add_restocks_and_audits(self):
        ledger, inventory, movements = _ledger(StockRow(variant_id="v1", on_hand=5))
        movement = ledger.adjust("v1", AdjustmentMode.ADD, 10, user_id="staff-1")

        assert inventory.get("v1").on_hand == 15
        assert movement.kind == MovementKind.RESTOCK
        assert movement.quantity == 10
        assert movement.reference_type == ReferenceType.ADJUSTMENT
        assert movement.reference_id is None
        assert movement.user_id == "staff-1"
        assert movement.reason == "Manual add adjustment"
        assert movements.records == [movement]

    def test_add_creates_missing_row(self):
        ledger, inventory, _ = _ledger()
        ledger.adjust("v1", AdjustmentMode.ADD, 4, product_id="p1")

        row = inventory.get("v1")
        assert row.on_hand == 4
        assert row.available == 4
        assert row.product_id == "p1"

    def test_remove_clamps_at_zero(self):
        ledger, inventory, _ = _ledger(StockRow(variant_id="v1", on_hand=3))
        movement = ledger.adjust("v1", AdjustmentMode.REMOVE, 10, reason="damaged")

        assert inventory.get("v1").on_hand == 0
        assert movement.kind == MovementKind.ADJUSTMENT_DECREASE
        assert movement.quantity == -3
        assert movement.reason == "damaged"

    def test_remove_on_missing_row_rejected(self):
        ledger, _, _ = _ledger()
        with pytest.raises(VariantStockNotFound):
            ledger.adjust("v1", AdjustmentMode.REMOVE, 1)

    def test_set_moves_to_target(self):
        ledger, inventory, _ = _ledger(
            StockRow(variant_id="v1", on_hand=10, reserved=2, committed=2)
        )
        movement = ledger.adjust("v1", AdjustmentMode.SET, 7)

        row = inventory.get("v1")
        assert row.on_hand == 7
        assert row.reserved == 2
        assert row.available == 3
        assert movement.quantity == -3
        assert movement.previous_available == 6
        assert movement.new_available == 3

    def test_noop_writes_no_movement(self):
        ledger, _, movements = _ledger(StockRow(variant_id="v1", on_hand=7))
        assert ledger.adjust("v1", AdjustmentMode.SET, 7) is None
        assert movements.records == []

    def test_negative_quantity_rejected(self):
        ledger, _, _ = _ledger(StockRow(variant_id="v1", on_hand=7))
        with pytest.raises(ValidationError, match="cannot be negative"):
            ledger.adjust("v1", AdjustmentMode.ADD, -1)
