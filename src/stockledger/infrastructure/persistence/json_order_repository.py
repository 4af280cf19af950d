"""JSON-document-backed implementation of OrderRepository.

Operates on the ``orders`` table of a document loaded by JsonUnitOfWork;
nothing touches disk until the unit of work commits.  Line items and
addresses are embedded in their order's record.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from stockledger.domain.model.order import (
    Address,
    AddressType,
    FinancialStatus,
    FulfillmentStatus,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderTotals,
)
from stockledger.domain.model.value_objects import Money, Quantity
from stockledger.domain.repository.order_repository import OrderRepository

_ADDRESS_FIELDS = (
    "first_name", "last_name", "company", "address1", "address2",
    "city", "state", "zip", "country", "phone",
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, document: dict[str, Any]) -> None:
        self._records: list[dict] = document.setdefault("orders", [])

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._records]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return orders

    def save(self, order: Order) -> None:
        raw = self._to_raw(order)
        for i, existing in enumerate(self._records):
            if existing["id"] == order.id:
                self._records[i] = raw
                return
        self._records.append(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        totals = order.totals
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer_id": order.customer_id,
            "email": order.email,
            "status": order.status.value,
            "financial_status": order.financial_status.value,
            "fulfillment_status": order.fulfillment_status.value,
            "currency": totals.total.currency,
            "subtotal": str(totals.subtotal.amount),
            "tax": str(totals.tax.amount),
            "shipping": str(totals.shipping.amount),
            "discount": str(totals.discount.amount),
            "total": str(totals.total.amount),
            "note": order.note,
            "shipping_method_id": order.shipping_method_id,
            "payment_method_id": order.payment_method_id,
            "cancelled_at": order.cancelled_at.isoformat() if order.cancelled_at else None,
            "cancelled_reason": order.cancelled_reason,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "billing_address": _address_to_raw(order.billing_address),
            "shipping_address": _address_to_raw(order.shipping_address),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "title": item.title,
                    "sku": item.sku,
                    "variant_title": item.variant_title,
                    "quantity": item.quantity.value,
                    "price": str(item.unit_price.amount),
                    "total": str(item.line_total.amount),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(key: str) -> Money:
            return Money(Decimal(raw.get(key) or "0"), currency)

        items = [
            OrderLineItem(
                id=i["id"],
                title=i["title"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["price"]), currency),
                product_id=i.get("product_id"),
                variant_id=i.get("variant_id"),
                sku=i.get("sku"),
                variant_title=i.get("variant_title"),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            items=items,
            totals=OrderTotals(
                subtotal=money("subtotal"),
                tax=money("tax"),
                shipping=money("shipping"),
                discount=money("discount"),
                total=money("total"),
            ),
            customer_id=raw.get("customer_id"),
            email=raw.get("email"),
            status=OrderStatus(raw["status"]),
            financial_status=FinancialStatus(raw["financial_status"]),
            fulfillment_status=FulfillmentStatus(raw["fulfillment_status"]),
            note=raw.get("note"),
            shipping_method_id=raw.get("shipping_method_id"),
            payment_method_id=raw.get("payment_method_id"),
            billing_address=_address_to_domain(raw.get("billing_address"), AddressType.BILLING),
            shipping_address=_address_to_domain(raw.get("shipping_address"), AddressType.SHIPPING),
            cancelled_at=_parse_dt(raw.get("cancelled_at")),
            cancelled_reason=raw.get("cancelled_reason"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at") or raw["created_at"]),
        )


def _address_to_raw(address: Address | None) -> dict | None:
    if address is None:
        return None
    return {name: getattr(address, name) for name in _ADDRESS_FIELDS}


def _address_to_domain(raw: dict | None, kind: AddressType) -> Address | None:
    if not raw:
        return None
    return Address(type=kind, **{name: raw.get(name) for name in _ADDRESS_FIELDS})


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
