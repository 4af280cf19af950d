"""Application service: Create Order use case.

Validates the request, writes the order header and its line-item
snapshots, and reserves stock for every line that points at a variant.
All of it happens in one unit of work: if any line is short on stock,
nothing (header, items, earlier reservations, audit records) is kept.
"""

from __future__ import annotations

import structlog

from stockledger.application.dto import AddressSpec, LineItemSpec, OrderDTO, TotalsSpec
from stockledger.application.mapping import (
    build_address,
    build_line_items,
    build_totals,
    order_detail_dto,
)
from stockledger.domain.exceptions import CustomerNotFound, ValidationError
from stockledger.domain.model.order import AddressType, Order
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        items: list[LineItemSpec],
        totals: TotalsSpec | None = None,
        customer_id: int | None = None,
        email: str | None = None,
        note: str | None = None,
        shipping_method_id: str | None = None,
        payment_method_id: str | None = None,
        billing_address: AddressSpec | None = None,
        shipping_address: AddressSpec | None = None,
    ) -> OrderDTO:
        """Create a pending order and reserve its stock.

        Steps:
        1. Build line items and addresses (input validation, no I/O).
        2. Check the customer exists, if one is referenced.
        3. Assign id and order number, build the header.
        4. Reserve stock line by line (fails on the first short line).
        5. Persist and commit.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        line_items = build_line_items(items)
        order_totals = build_totals(totals, line_items)
        billing = build_address(billing_address, AddressType.BILLING)
        shipping = build_address(shipping_address, AddressType.SHIPPING)

        with self._uow:
            if customer_id is not None and self._uow.customers.get_by_id(customer_id) is None:
                raise CustomerNotFound(customer_id)

            order = Order.create(
                order_id=self._uow.orders.next_id(),
                items=line_items,
                totals=order_totals,
                customer_id=customer_id,
                email=email,
                note=note,
                shipping_method_id=shipping_method_id,
                payment_method_id=payment_method_id,
                billing_address=billing,
                shipping_address=shipping,
            )

            svc = InventoryReservationService.build(
                self._uow.inventory, self._uow.movements
            )
            svc.reserve_for_order(order)

            self._uow.orders.save(order)
            dto = order_detail_dto(self._uow, order)
            self._uow.commit()

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            items=len(order.items),
            total=str(order.total),
        )
        return dto
