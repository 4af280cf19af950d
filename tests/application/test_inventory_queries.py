"""Integration tests for inventory lookup, summary, adjustments and history."""

import pytest

from stockledger.application.adjust_inventory import AdjustInventoryHandler
from stockledger.application.create_order import CreateOrderHandler
from stockledger.application.dto import LineItemSpec
from stockledger.application.get_inventory import GetInventoryForVariantsHandler
from stockledger.application.show_inventory import ShowInventoryHandler
from stockledger.application.show_movements import ShowMovementsHandler
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.inventory import StockRow
from tests.fakes import FakeUnitOfWork


def _uow() -> FakeUnitOfWork:
    return FakeUnitOfWork(rows=[
        StockRow(variant_id="v1", on_hand=50, product_id="p1"),
        StockRow(variant_id="v2", on_hand=6, reserved=1, committed=1, product_id="p1"),
        StockRow(variant_id="v3", on_hand=0, product_id="p2"),
    ])


class TestGetInventoryForVariants:

    def test_known_ids_only(self):
        rows = GetInventoryForVariantsHandler(_uow()).handle(["v1", "nope", "v2"])
        assert set(rows) == {"v1", "v2"}
        assert rows["v2"].available == 4

    def test_empty_input(self):
        assert GetInventoryForVariantsHandler(_uow()).handle([]) == {}


class TestShowInventory:

    def test_summary(self):
        summary = ShowInventoryHandler(_uow()).handle()

        assert summary.total_skus == 3
        assert summary.total_on_hand == 56
        assert summary.total_available == 54
        assert summary.total_reserved == 1
        assert summary.in_stock == 2
        assert summary.low_stock == 1
        assert summary.out_of_stock == 1

    def test_threshold_configurable(self):
        summary = ShowInventoryHandler(_uow(), low_stock_threshold=2).handle()
        assert summary.low_stock == 0
        assert summary.low_stock_threshold == 2


class TestAdjustInventory:

    def test_restock(self):
        uow = _uow()
        row = AdjustInventoryHandler(uow).handle("v3", "add", 12, reason="PO-77")

        assert row.on_hand == 12
        assert row.available == 12
        assert uow.movements.records[-1].reason == "PO-77"

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError, match="Unknown adjustment"):
            AdjustInventoryHandler(_uow()).handle("v1", "double", 2)

    def test_new_variant_row(self):
        uow = _uow()
        row = AdjustInventoryHandler(uow).handle("v9", "set", 3, product_id="p9")
        assert (row.variant_id, row.product_id, row.on_hand) == ("v9", "p9", 3)


class TestShowMovements:

    def test_history_for_variant(self):
        uow = _uow()
        CreateOrderHandler(uow).handle(
            [LineItemSpec(title="Tee", quantity=2, price="10", variant_id="v1")]
        )
        AdjustInventoryHandler(uow).handle("v1", "remove", 5)

        history = ShowMovementsHandler(uow).handle(variant_id="v1")
        assert [m.kind for m in history] == ["reservation", "adjustment_decrease"]
        assert history[0].reference == "order:1"
        assert history[1].reference == "adjustment"
        assert (history[1].previous_available, history[1].new_available) == (46, 41)

    def test_history_for_order(self):
        uow = _uow()
        CreateOrderHandler(uow).handle([
            LineItemSpec(title="Tee", quantity=1, price="10", variant_id="v1"),
            LineItemSpec(title="Tee XL", quantity=1, price="10", variant_id="v2"),
        ])
        history = ShowMovementsHandler(uow).handle(order_id=1)
        assert [m.variant_id for m in history] == ["v1", "v2"]

    def test_exactly_one_filter(self):
        with pytest.raises(ValidationError, match="exactly one"):
            ShowMovementsHandler(_uow()).handle()
