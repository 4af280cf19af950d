"""Unit tests for the InventoryReservationService domain service."""

import pytest

from stockledger.domain.exceptions import InsufficientInventory, VariantStockNotFound
from stockledger.domain.model.audit import MovementKind, ReferenceType
from stockledger.domain.model.inventory import StockRow
from stockledger.domain.model.order import Order, OrderLineItem, OrderTotals
from stockledger.domain.model.value_objects import Money, Quantity
from stockledger.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from tests.fakes import FakeInventoryRepository, FakeMovementRepository


def _line(variant_id: str | None, qty: int, title: str = "Tee", id: str | None = None):
    return OrderLineItem(
        id=id or f"line-{variant_id}",
        title=title,
        quantity=Quantity(qty),
        unit_price=Money.of("10.00"),
        product_id="p1",
        variant_id=variant_id,
    )


def _order(*lines: OrderLineItem) -> Order:
    return Order.create(order_id=1, items=list(lines), totals=OrderTotals.for_items(list(lines)))


def _setup(*rows: tuple[str, int, int]):
    """Rows as (variant_id, on_hand, held) where held is both reserved and committed."""
    inventory = FakeInventoryRepository([
        StockRow(variant_id=vid, on_hand=on_hand, reserved=held, committed=held, product_id="p1")
        for vid, on_hand, held in rows
    ])
    movements = FakeMovementRepository()
    svc = InventoryReservationService.build(inventory, movements)
    return svc, inventory, movements


class TestReserveForOrder:

    def test_reserves_twin_counters(self):
        svc, inventory, _ = _setup(("v1", 10, 0))
        svc.reserve_for_order(_order(_line("v1", 2)))

        row = inventory.get("v1")
        assert (row.on_hand, row.reserved, row.committed, row.available) == (10, 2, 2, 6)

    def test_writes_one_movement_per_line(self):
        svc, _, movements = _setup(("v1", 10, 0), ("v2", 10, 0))
        svc.reserve_for_order(_order(_line("v1", 2), _line("v2", 1)))

        assert [m.kind for m in movements.records] == [MovementKind.RESERVATION] * 2
        first = movements.records[0]
        assert first.quantity == 2
        assert first.previous_available == 10
        assert first.new_available == 6
        assert first.reference_type == ReferenceType.ORDER
        assert first.reference_id == "1"
        assert first.reason == "Order created: ORD-1001"

    def test_insufficient_stock_rejected(self):
        svc, inventory, movements = _setup(("v1", 10, 4))
        with pytest.raises(InsufficientInventory, match="Available: 2, Required: 3"):
            svc.reserve_for_order(_order(_line("v1", 3)))
        assert inventory.get("v1").reserved == 4
        assert movements.records == []

    def test_untracked_variant_skipped(self):
        svc, _, movements = _setup()
        svc.reserve_for_order(_order(_line("ghost", 5)))
        assert movements.records == []

    def test_custom_line_never_touches_stock(self):
        svc, inventory, movements = _setup(("v1", 10, 0))
        svc.reserve_for_order(_order(_line(None, 3, id="custom")))
        assert inventory.get("v1").reserved == 0
        assert movements.records == []


class TestReconcileEdit:

    def test_quantity_increase_reserves_difference(self):
        svc, inventory, movements = _setup(("v1", 10, 2))
        order = _order(_line("v1", 2))
        svc.reconcile_edit(order, list(order.items), [_line("v1", 3)])

        row = inventory.get("v1")
        assert (row.reserved, row.committed, row.available) == (3, 3, 4)
        assert movements.records[0].quantity == 1
        assert movements.records[0].kind == MovementKind.RESERVATION
        assert movements.records[0].reason == "Order item quantity changed: Order 1"

    def test_quantity_decrease_releases_without_check(self):
        svc, inventory, movements = _setup(("v1", 4, 2))
        order = _order(_line("v1", 2))
        svc.reconcile_edit(order, list(order.items), [_line("v1", 1)])

        assert inventory.get("v1").reserved == 1
        assert movements.records[0].kind == MovementKind.CANCELLATION
        assert movements.records[0].quantity == -1

    def test_increase_beyond_stock_rejected(self):
        svc, _, _ = _setup(("v1", 6, 2))
        order = _order(_line("v1", 2))
        with pytest.raises(InsufficientInventory, match="Available: 2, Required: 3"):
            svc.reconcile_edit(order, list(order.items), [_line("v1", 5)])

    def test_removed_line_released_in_full(self):
        svc, inventory, movements = _setup(("v1", 10, 2), ("v2", 10, 1))
        order = _order(_line("v1", 2), _line("v2", 1))
        svc.reconcile_edit(order, list(order.items), [_line("v1", 2)])

        assert inventory.get("v2").reserved == 0
        assert inventory.get("v1").reserved == 2
        assert len(movements.records) == 1
        assert movements.records[0].reason == "Order item removed: Order 1"

    def test_variant_swap_is_release_plus_reserve(self):
        svc, inventory, movements = _setup(("v1", 10, 2), ("v2", 10, 0))
        order = _order(_line("v1", 2))
        svc.reconcile_edit(order, list(order.items), [_line("v2", 3)])

        assert inventory.get("v1").reserved == 0
        assert inventory.get("v2").reserved == 3
        assert [m.reason for m in movements.records] == [
            "Order item removed: Order 1",
            "Order item added: Order 1",
        ]

    def test_unchanged_lines_write_nothing(self):
        svc, _, movements = _setup(("v1", 10, 2))
        order = _order(_line("v1", 2))
        svc.reconcile_edit(order, list(order.items), [_line("v1", 2, id="fresh")])
        assert movements.records == []


class TestReleaseForOrder:

    def test_releases_every_line(self):
        svc, inventory, movements = _setup(("v1", 10, 2))
        svc.release_for_order(_order(_line("v1", 2)))

        row = inventory.get("v1")
        assert (row.reserved, row.committed, row.available) == (0, 0, 10)
        assert movements.records[0].kind == MovementKind.CANCELLATION
        assert movements.records[0].quantity == -2
        assert movements.records[0].reason == "Order cancelled: ORD-1001"


class TestConsumeForOrder:

    def test_consumes_on_hand_and_holds(self):
        svc, inventory, movements = _setup(("v1", 10, 2))
        svc.consume_for_order(_order(_line("v1", 2)))

        row = inventory.get("v1")
        assert (row.on_hand, row.reserved, row.committed, row.available) == (8, 0, 0, 8)
        movement = movements.records[0]
        assert movement.kind == MovementKind.FULFILLMENT
        assert movement.quantity == -2
        assert movement.previous_reserved == 2
        assert movement.new_reserved == 0

    def test_missing_row_is_fatal(self):
        svc, _, _ = _setup()
        with pytest.raises(VariantStockNotFound, match="ghost"):
            svc.consume_for_order(_order(_line("ghost", 1)))

    def test_more_than_on_hand_rejected(self):
        svc, _, _ = _setup(("v1", 1, 0))
        with pytest.raises(InsufficientInventory, match="Available: 1, Required: 2"):
            svc.consume_for_order(_order(_line("v1", 2)))
