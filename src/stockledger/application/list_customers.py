"""Application service: List Customers use case (query)."""

from __future__ import annotations

from stockledger.application.dto import CustomerDTO
from stockledger.application.mapping import customer_dto
from stockledger.domain.repository.unit_of_work import UnitOfWork


class ListCustomersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, search: str = "") -> list[CustomerDTO]:
        """Customers sorted by name; ``search`` matches email, names or phone."""
        needle = search.strip().lower()
        with self._uow:
            customers = self._uow.customers.list_all()

        if needle:
            customers = [
                c for c in customers
                if any(
                    needle in value.lower()
                    for value in (c.email, c.first_name, c.last_name, c.phone)
                    if value
                )
            ]
        customers.sort(key=lambda c: ((c.first_name or "").lower(), (c.last_name or "").lower()))
        return [customer_dto(c) for c in customers]
