"""Application service: Show Order use case (query)."""

from __future__ import annotations

from stockledger.application.dto import OrderDTO
from stockledger.application.mapping import order_detail_dto
from stockledger.domain.exceptions import OrderNotFound
from stockledger.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            return order_detail_dto(self._uow, order)
