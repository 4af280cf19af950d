"""Integration tests for the UpdateOrder (edit items) use case."""

import pytest

from stockledger.application.create_order import CreateOrderHandler
from stockledger.application.dto import LineItemSpec
from stockledger.application.update_order import UpdateOrderHandler
from stockledger.domain.exceptions import (
    InsufficientInventory,
    OrderNotFound,
    ValidationError,
)
from stockledger.domain.model.inventory import StockRow
from tests.fakes import FakeUnitOfWork


def _item(variant="v1", qty=2, title="Tee", id=None):
    return LineItemSpec(title=title, quantity=qty, price="10", variant_id=variant, id=id)


def _setup(on_hand: int = 20):
    uow = FakeUnitOfWork(rows=[
        StockRow(variant_id="v1", on_hand=on_hand),
        StockRow(variant_id="v2", on_hand=on_hand),
    ])
    created = CreateOrderHandler(uow).handle([_item(qty=2)])
    return UpdateOrderHandler(uow), uow, created


class TestUpdateOrderQuantities:

    def test_increase_reserves_delta(self):
        handler, uow, order = _setup()
        handler.handle(order.id, [_item(qty=5, id=order.items[0].id)])

        row = uow.inventory.get("v1")
        assert (row.reserved, row.committed) == (5, 5)

    def test_decrease_releases_delta(self):
        handler, uow, order = _setup()
        handler.handle(order.id, [_item(qty=5)])
        handler.handle(order.id, [_item(qty=2)])

        row = uow.inventory.get("v1")
        assert (row.reserved, row.committed, row.available) == (2, 2, 16)

    def test_increase_beyond_availability_rolls_back(self):
        handler, uow, order = _setup(on_hand=6)
        with pytest.raises(InsufficientInventory, match="Available: 2, Required: 3"):
            handler.handle(order.id, [_item(qty=5)])

        assert uow.inventory.get("v1").reserved == 2
        assert uow.orders.get_by_id(order.id).items[0].quantity.value == 2


class TestUpdateOrderItems:

    def test_items_replaced_and_totals_recomputed(self):
        handler, uow, order = _setup()
        dto = handler.handle(order.id, [_item(qty=1), _item("v2", 3, "Hoodie")], note="rush")

        assert [i.title for i in dto.items] == ["Tee", "Hoodie"]
        assert dto.total == "$40.00"
        assert dto.note == "rush"
        assert uow.inventory.get("v2").reserved == 3

    def test_removed_line_released(self):
        handler, uow, order = _setup()
        handler.handle(order.id, [_item("v2", 1)])

        assert uow.inventory.get("v1").reserved == 0
        assert uow.inventory.get("v2").reserved == 1

    def test_repeated_variant_rejected_and_reservation_kept(self):
        handler, uow, order = _setup()
        with pytest.raises(ValidationError, match="more than one line"):
            handler.handle(order.id, [_item(qty=2), _item(qty=3)])

        row = uow.inventory.get("v1")
        assert (row.reserved, row.committed) == (2, 2)
        assert [i.quantity.value for i in uow.orders.get_by_id(order.id).items] == [2]

    def test_empty_list_releases_everything(self):
        handler, uow, order = _setup()
        dto = handler.handle(order.id, [])

        assert dto.items == []
        assert uow.inventory.get("v1").reserved == 0

    def test_movements_reference_the_order(self):
        handler, uow, order = _setup()
        handler.handle(order.id, [_item(qty=3)])

        reasons = [m.reason for m in uow.movements.list_for_reference("order", str(order.id))]
        assert reasons == ["Order created: ORD-1001", "Order item quantity changed: Order 1"]

    def test_missing_order(self):
        handler, _, _ = _setup()
        with pytest.raises(OrderNotFound, match="#99"):
            handler.handle(99, [_item()])
