"""Application service: List Orders use case (query).

Free-text search matches the order number, the order email and the linked
customer's first or last name, case-insensitively.  Results are newest
first and paginated.
"""

from __future__ import annotations

from stockledger.application.dto import OrderPageDTO
from stockledger.application.mapping import order_summary_dto
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.customer import Customer
from stockledger.domain.model.order import Order, OrderStatus
from stockledger.domain.repository.unit_of_work import UnitOfWork

DEFAULT_PAGE_SIZE = 25


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        search: str = "",
        status: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> OrderPageDTO:
        if page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit < 1:
            raise ValidationError("Limit must be 1 or greater")
        wanted_status = self._parse_status(status)

        with self._uow:
            orders = self._uow.orders.list_all()
            customers = self._customers_for(orders)

            needle = search.strip().lower()
            matches = [
                order
                for order in orders
                if (wanted_status is None or order.status == wanted_status)
                and (not needle or self._matches(order, customers.get(order.customer_id), needle))
            ]

        start = (page - 1) * limit
        window = matches[start:start + limit]
        return OrderPageDTO(
            orders=[order_summary_dto(o, customers.get(o.customer_id)) for o in window],
            total=len(matches),
            page=page,
            limit=limit,
            has_next_page=page * limit < len(matches),
            has_previous_page=page > 1,
        )

    # --- Internal helpers -----------------------------------------------------

    def _customers_for(self, orders: list[Order]) -> dict[int | None, Customer]:
        found: dict[int | None, Customer] = {}
        for customer_id in {o.customer_id for o in orders if o.customer_id is not None}:
            customer = self._uow.customers.get_by_id(customer_id)
            if customer is not None:
                found[customer_id] = customer
        return found

    @staticmethod
    def _matches(order: Order, customer: Customer | None, needle: str) -> bool:
        haystack = [order.order_number, order.email]
        if customer is not None:
            haystack += [customer.first_name, customer.last_name]
        return any(needle in value.lower() for value in haystack if value)

    @staticmethod
    def _parse_status(status: str | None) -> OrderStatus | None:
        if not status:
            return None
        try:
            return OrderStatus(status.lower())
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Unknown order status '{status}' (expected {allowed})")
