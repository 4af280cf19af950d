"""Application service: Add Customer use case."""

from __future__ import annotations

from stockledger.application.dto import CustomerDTO
from stockledger.application.mapping import customer_dto
from stockledger.domain.model.customer import Customer
from stockledger.domain.repository.unit_of_work import UnitOfWork


class AddCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> CustomerDTO:
        customer = Customer.create(
            email=email, first_name=first_name, last_name=last_name, phone=phone
        )
        with self._uow:
            customer.id = self._uow.customers.next_id()
            self._uow.customers.save(customer)
            self._uow.commit()
        return customer_dto(customer)
