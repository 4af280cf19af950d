"""Integration tests for the FulfillOrder use case."""

import pytest

from stockledger.application.cancel_order import CancelOrderHandler
from stockledger.application.create_order import CreateOrderHandler
from stockledger.application.dto import LineItemSpec
from stockledger.application.fulfill_order import FulfillOrderHandler
from stockledger.domain.exceptions import (
    InsufficientInventory,
    OrderAlreadyFulfilled,
    OrderCancelled,
    OrderNotFound,
    VariantStockNotFound,
)
from stockledger.domain.model.customer import Customer
from stockledger.domain.model.inventory import StockRow
from stockledger.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork


def _setup(rows=None, customers=None, items=None, customer_id=None):
    uow = FakeUnitOfWork(
        rows=rows if rows is not None else [StockRow(variant_id="v1", on_hand=10)],
        customers=customers,
    )
    items = items or [LineItemSpec(title="Tee", quantity=3, price="10", variant_id="v1")]
    order = CreateOrderHandler(uow).handle(items, customer_id=customer_id)
    return FulfillOrderHandler(uow), uow, order


class TestFulfillOrder:

    def test_consumes_stock(self):
        handler, uow, order = _setup()
        handler.handle(order.id)

        row = uow.inventory.get("v1")
        assert (row.on_hand, row.reserved, row.committed, row.available) == (7, 0, 0, 7)

    def test_statuses(self):
        handler, _, order = _setup()
        dto = handler.handle(order.id)

        assert dto.status == "fulfilled"
        assert dto.financial_status == "paid"
        assert dto.fulfillment_status == "fulfilled"

    def test_fulfillment_audited(self):
        handler, uow, order = _setup()
        handler.handle(order.id)

        last = uow.movements.records[-1]
        assert last.kind.value == "fulfillment"
        assert last.quantity == -3
        assert (last.previous_reserved, last.new_reserved) == (3, 0)
        assert last.reason == "Order fulfillment: ORD-1001"

    def test_customer_aggregates_updated(self):
        customer = Customer(id=5, email="bo@example.com")
        handler, uow, order = _setup(
            customers=[customer],
            items=[LineItemSpec(title="Tee", quantity=1, price="49.99", variant_id="v1")],
            customer_id=5,
        )
        handler.handle(order.id)

        saved = uow.customers.get_by_id(5)
        assert saved.orders_count == 1
        assert saved.total_spent == Money.of("49.99")


class TestFulfillOrderPreconditions:

    def test_already_fulfilled_rejected_without_mutation(self):
        handler, uow, order = _setup()
        handler.handle(order.id)
        movements_before = len(uow.movements.records)

        with pytest.raises(OrderAlreadyFulfilled, match="ORD-1001 is already fulfilled"):
            handler.handle(order.id)

        assert uow.inventory.get("v1").on_hand == 7
        assert len(uow.movements.records) == movements_before

    def test_cancelled_rejected_without_mutation(self):
        handler, uow, order = _setup()
        CancelOrderHandler(uow).handle(order.id)

        with pytest.raises(OrderCancelled):
            handler.handle(order.id)

        row = uow.inventory.get("v1")
        assert (row.on_hand, row.reserved, row.available) == (10, 0, 10)

    def test_missing_stock_row_is_fatal(self):
        handler, uow, order = _setup(
            rows=[StockRow(variant_id="v1", on_hand=10)],
            items=[
                LineItemSpec(title="Tee", quantity=1, price="10", variant_id="v1"),
                LineItemSpec(title="Mug", quantity=1, price="8", variant_id="untracked"),
            ],
        )
        with pytest.raises(VariantStockNotFound, match="untracked"):
            handler.handle(order.id)

        # the first line's consumption is rolled back too
        assert uow.inventory.get("v1").on_hand == 10
        assert uow.orders.get_by_id(order.id).status.value == "pending"

    def test_on_hand_shortfall_rejected(self):
        handler, uow, order = _setup()
        uow.inventory.save(StockRow(variant_id="v1", on_hand=2, reserved=3, committed=3))

        with pytest.raises(InsufficientInventory, match="Available: 2, Required: 3"):
            handler.handle(order.id)

    def test_missing_order(self):
        handler, _, _ = _setup()
        with pytest.raises(OrderNotFound):
            handler.handle(77)
