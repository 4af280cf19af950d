"""JSON-document-backed implementation of CustomerRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from stockledger.domain.model.customer import Customer
from stockledger.domain.model.value_objects import Money
from stockledger.domain.repository.customer_repository import CustomerRepository


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, document: dict[str, Any]) -> None:
        self._records: list[dict] = document.setdefault("customers", [])

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(c["id"] for c in self._records) + 1

    def get_by_id(self, customer_id: int) -> Customer | None:
        for raw in self._records:
            if raw["id"] == customer_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Customer]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, customer: Customer) -> None:
        if customer.id is None:
            customer.id = self.next_id()
        raw = self._to_raw(customer)
        for i, existing in enumerate(self._records):
            if existing["id"] == customer.id:
                self._records[i] = raw
                return
        self._records.append(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(customer: Customer) -> dict:
        return {
            "id": customer.id,
            "email": customer.email,
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "phone": customer.phone,
            "orders_count": customer.orders_count,
            "total_spent": str(customer.total_spent.amount),
            "currency": customer.total_spent.currency,
            "created_at": customer.created_at.isoformat(),
            "updated_at": customer.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            email=raw.get("email"),
            first_name=raw.get("first_name"),
            last_name=raw.get("last_name"),
            phone=raw.get("phone"),
            orders_count=raw.get("orders_count") or 0,
            total_spent=Money(
                Decimal(raw.get("total_spent") or "0"), raw.get("currency", "USD")
            ),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at") or raw["created_at"]),
        )
