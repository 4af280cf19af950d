"""Application service: Cancel Order use case.

Releases the full reserved quantity of every stocked line, then marks the
order cancelled and refunded.

The order's current status is not checked: a fulfilled order can be
cancelled too, and its consumed stock is not returned to on-hand.
"""

from __future__ import annotations

import structlog

from stockledger.application.dto import OrderDTO
from stockledger.application.mapping import order_detail_dto
from stockledger.domain.exceptions import OrderNotFound
from stockledger.domain.model.order import OrderStatus
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, reason: str | None = None) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            if order.status != OrderStatus.PENDING:
                logger.warning(
                    "Cancelling an order that is no longer pending",
                    order_number=order.order_number,
                    status=order.status.value,
                )

            svc = InventoryReservationService.build(
                self._uow.inventory, self._uow.movements
            )
            svc.release_for_order(order)

            order.cancel(reason)
            self._uow.orders.save(order)
            dto = order_detail_dto(self._uow, order)
            self._uow.commit()

        logger.info("Order cancelled", order_id=order.id, order_number=order.order_number)
        return dto
