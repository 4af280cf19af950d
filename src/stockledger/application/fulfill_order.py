"""Application service: Fulfill Order use case.

Checks the fulfillment preconditions, consumes stock for every stocked
line (on-hand, reserved and committed all drop by the line quantity),
marks the order fulfilled and paid, and rolls the order into the
customer's lifetime figures.
"""

from __future__ import annotations

import structlog

from stockledger.application.dto import OrderDTO
from stockledger.application.mapping import order_detail_dto
from stockledger.domain.exceptions import OrderNotFound
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = structlog.get_logger(__name__)


class FulfillOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            # Preconditions before any ledger write.
            order.ensure_fulfillable()

            svc = InventoryReservationService.build(
                self._uow.inventory, self._uow.movements
            )
            svc.consume_for_order(order)

            order.mark_fulfilled()
            self._uow.orders.save(order)

            if order.customer_id is not None:
                customer = self._uow.customers.get_by_id(order.customer_id)
                if customer is None:
                    logger.warning(
                        "Fulfilled order references an unknown customer",
                        order_number=order.order_number,
                        customer_id=order.customer_id,
                    )
                else:
                    customer.record_fulfilled_order(order.total)
                    self._uow.customers.save(customer)

            dto = order_detail_dto(self._uow, order)
            self._uow.commit()

        logger.info(
            "Order fulfilled",
            order_id=order.id,
            order_number=order.order_number,
            total=str(order.total),
        )
        return dto
