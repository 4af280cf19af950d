"""Application service: Update Order use case.

The caller sends the complete new item list.  Stock is reconciled by
diffing it against the stored items, then the stored items are replaced
wholesale and the header totals/note are overwritten.
"""

from __future__ import annotations

import structlog

from stockledger.application.dto import LineItemSpec, OrderDTO, TotalsSpec
from stockledger.application.mapping import build_line_items, build_totals, order_detail_dto
from stockledger.domain.exceptions import OrderNotFound
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = structlog.get_logger(__name__)


class UpdateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        order_id: int,
        items: list[LineItemSpec],
        totals: TotalsSpec | None = None,
        note: str | None = None,
    ) -> OrderDTO:
        desired = build_line_items(items)
        order_totals = build_totals(totals, desired)

        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            svc = InventoryReservationService.build(
                self._uow.inventory, self._uow.movements
            )
            svc.reconcile_edit(order, existing=list(order.items), desired=desired)

            order.replace_items(desired, order_totals, note)
            self._uow.orders.save(order)
            dto = order_detail_dto(self._uow, order)
            self._uow.commit()

        logger.info(
            "Order updated",
            order_id=order.id,
            order_number=order.order_number,
            items=len(order.items),
            total=str(order.total),
        )
        return dto
