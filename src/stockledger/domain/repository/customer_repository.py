"""Abstract repository for Customer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique customer ID."""

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Customer | None:
        """Return a customer by ID, or None."""

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist a new or updated customer (assigns an ID when missing)."""
