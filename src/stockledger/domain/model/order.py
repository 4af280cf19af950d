"""Order aggregate: header, totals, addresses and line items.

The Order owns its line items.  Line items are snapshots: title, sku and
price are copied when the order is written and never re-read from the
catalog, so historical orders stay stable when products change.

Stock effects are not applied here; the application handlers coordinate
the ledger and then call the state transitions below.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockledger.domain.exceptions import (
    OrderAlreadyFulfilled,
    OrderCancelled,
    ValidationError,
)
from stockledger.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class FinancialStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class FulfillmentStatus(Enum):
    UNFULFILLED = "unfulfilled"
    FULFILLED = "fulfilled"
    PARTIAL = "partial"


def new_line_item_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class OrderLineItem:
    """One product/variant entry, frozen at the price it was sold for."""

    id: str
    title: str
    quantity: Quantity
    unit_price: Money  # locked at order time
    product_id: str | None = None
    variant_id: str | None = None
    sku: str | None = None
    variant_title: str | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Line item title is required")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def key(self) -> str:
        """Identity used when diffing an edited order against its old items."""
        return self.variant_id or self.product_id or self.id

    @property
    def is_stocked(self) -> bool:
        return bool(self.variant_id)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money

    @staticmethod
    def compute(
        subtotal: Money,
        tax: Money | None = None,
        shipping: Money | None = None,
        discount: Money | None = None,
    ) -> OrderTotals:
        """Derive ``total = subtotal + tax + shipping - discount``, floored at zero."""
        tax = tax or Money.zero()
        shipping = shipping or Money.zero()
        discount = discount or Money.zero()
        gross = subtotal + tax + shipping
        total = gross - discount if discount <= gross else Money.zero(gross.currency)
        return OrderTotals(
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            discount=discount,
            total=total,
        )

    @staticmethod
    def for_items(items: list[OrderLineItem], **charges: Money) -> OrderTotals:
        subtotal = Money.zero()
        for item in items:
            subtotal = subtotal + item.line_total
        return OrderTotals.compute(subtotal, **charges)


class AddressType(Enum):
    BILLING = "billing"
    SHIPPING = "shipping"


@dataclass(frozen=True)
class Address:
    type: AddressType
    address1: str
    city: str
    country: str
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address2: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None

    def __post_init__(self) -> None:
        for name in ("address1", "city", "country"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ValidationError(
                    f"{self.type.value.capitalize()} address is missing '{name}'"
                )


ORDER_NUMBER_OFFSET = 1000


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders.  The plain constructor is for
    repositories reconstituting persisted state without re-validating.
    """

    id: int
    order_number: str
    items: list[OrderLineItem]
    totals: OrderTotals
    customer_id: int | None = None
    email: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    financial_status: FinancialStatus = FinancialStatus.PENDING
    fulfillment_status: FulfillmentStatus = FulfillmentStatus.UNFULFILLED
    note: str | None = None
    shipping_method_id: str | None = None
    payment_method_id: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    cancelled_at: datetime | None = None
    cancelled_reason: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: int,
        items: list[OrderLineItem],
        totals: OrderTotals,
        customer_id: int | None = None,
        email: str | None = None,
        note: str | None = None,
        shipping_method_id: str | None = None,
        payment_method_id: str | None = None,
        billing_address: Address | None = None,
        shipping_address: Address | None = None,
    ) -> Order:
        if not items:
            raise ValidationError("Order must contain at least one item")
        if billing_address is not None and billing_address.type != AddressType.BILLING:
            raise ValidationError("Billing address has the wrong type")
        if shipping_address is not None and shipping_address.type != AddressType.SHIPPING:
            raise ValidationError("Shipping address has the wrong type")

        return Order(
            id=order_id,
            order_number=f"ORD-{ORDER_NUMBER_OFFSET + order_id}",
            items=list(items),
            totals=totals,
            customer_id=customer_id,
            email=(email or "").strip() or None,
            note=note or None,
            shipping_method_id=shipping_method_id,
            payment_method_id=payment_method_id,
            billing_address=billing_address,
            shipping_address=shipping_address,
        )

    # --- State transitions ----------------------------------------------------

    def replace_items(
        self,
        items: list[OrderLineItem],
        totals: OrderTotals,
        note: str | None,
    ) -> None:
        """Swap the whole item set; snapshots are rewritten even if unchanged."""
        self.items = list(items)
        self.totals = totals
        self.note = note or None
        self._touch()

    def cancel(self, reason: str | None = None) -> None:
        """Move to CANCELLED / REFUNDED / UNFULFILLED.

        Stock release happens before this is called.  A fulfilled order can
        still be cancelled; its consumed stock is not given back.
        """
        now = datetime.now(timezone.utc)
        self.status = OrderStatus.CANCELLED
        self.financial_status = FinancialStatus.REFUNDED
        self.fulfillment_status = FulfillmentStatus.UNFULFILLED
        self.cancelled_at = now
        self.cancelled_reason = reason or None
        self.updated_at = now

    def ensure_fulfillable(self) -> None:
        """Fulfillment preconditions, checked before the ledger is touched."""
        if self.fulfillment_status == FulfillmentStatus.FULFILLED:
            raise OrderAlreadyFulfilled(self.order_number)
        if self.status == OrderStatus.CANCELLED:
            raise OrderCancelled(self.order_number)

    def mark_fulfilled(self) -> None:
        self.ensure_fulfillable()
        self.status = OrderStatus.FULFILLED
        self.financial_status = FinancialStatus.PAID
        self.fulfillment_status = FulfillmentStatus.FULFILLED
        self._touch()

    # --- Queries --------------------------------------------------------------

    @property
    def total(self) -> Money:
        return self.totals.total

    @property
    def stocked_items(self) -> list[OrderLineItem]:
        return [item for item in self.items if item.is_stocked]

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
