"""Integration tests for the CancelOrder use case."""

import pytest

from stockledger.application.cancel_order import CancelOrderHandler
from stockledger.application.create_order import CreateOrderHandler
from stockledger.application.dto import LineItemSpec
from stockledger.application.fulfill_order import FulfillOrderHandler
from stockledger.domain.exceptions import OrderNotFound
from stockledger.domain.model.inventory import StockRow
from tests.fakes import FakeUnitOfWork


def _setup():
    uow = FakeUnitOfWork(rows=[StockRow(variant_id="v1", on_hand=10)])
    order = CreateOrderHandler(uow).handle(
        [LineItemSpec(title="Tee", quantity=3, price="10", variant_id="v1")]
    )
    return CancelOrderHandler(uow), uow, order


class TestCancelOrder:

    def test_reservation_round_trip(self):
        handler, uow, order = _setup()
        handler.handle(order.id)

        row = uow.inventory.get("v1")
        assert (row.on_hand, row.reserved, row.committed, row.available) == (10, 0, 0, 10)

    def test_statuses_and_reason(self):
        handler, _, order = _setup()
        dto = handler.handle(order.id, reason="fraud check")

        assert dto.status == "cancelled"
        assert dto.financial_status == "refunded"
        assert dto.fulfillment_status == "unfulfilled"
        assert dto.cancelled_reason == "fraud check"
        assert dto.cancelled_at is not None

    def test_cancellation_audited(self):
        handler, uow, order = _setup()
        handler.handle(order.id)

        last = uow.movements.records[-1]
        assert last.kind.value == "cancellation"
        assert last.quantity == -3
        assert (last.previous_available, last.new_available) == (4, 10)
        assert last.reason == "Order cancelled: ORD-1001"

    def test_cancelling_fulfilled_order_keeps_stock_consumed(self):
        handler, uow, order = _setup()
        FulfillOrderHandler(uow).handle(order.id)
        dto = handler.handle(order.id)

        row = uow.inventory.get("v1")
        assert (row.on_hand, row.reserved, row.committed, row.available) == (7, 0, 0, 7)
        assert dto.status == "cancelled"

    def test_missing_order(self):
        handler, _, _ = _setup()
        with pytest.raises(OrderNotFound):
            handler.handle(404)
