"""Data Transfer Objects: plain containers that cross layer boundaries.

Input specs carry what a caller (admin console, checkout, CLI) asks for;
output DTOs carry what it gets back.  Neither exposes domain objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class LineItemSpec:
    """One desired line.  ``id`` is set only when editing an existing line."""

    title: str
    quantity: int
    price: str | Decimal
    product_id: str | None = None
    variant_id: str | None = None
    sku: str | None = None
    variant_title: str | None = None
    id: str | None = None


@dataclass(frozen=True)
class TotalsSpec:
    """Monetary totals computed by the caller.

    When ``total`` is left out it is derived as
    subtotal + tax + shipping - discount.
    """

    subtotal: str | Decimal
    tax: str | Decimal = "0"
    shipping: str | Decimal = "0"
    discount: str | Decimal = "0"
    total: str | Decimal | None = None


@dataclass(frozen=True)
class AddressSpec:
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


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class StockRowDTO:
    variant_id: str
    product_id: str | None
    on_hand: int
    reserved: int
    committed: int
    available: int


@dataclass(frozen=True)
class CustomerDTO:
    id: int
    name: str
    email: str | None
    phone: str | None
    orders_count: int
    total_spent: str  # formatted, e.g. "$49.99"


@dataclass(frozen=True)
class AddressDTO:
    type: str
    lines: list[str]


@dataclass(frozen=True)
class OrderLineItemDTO:
    id: str
    title: str
    quantity: int
    unit_price: str
    line_total: str
    sku: str | None = None
    variant_title: str | None = None
    product_id: str | None = None
    variant_id: str | None = None
    image_url: str | None = None
    inventory: StockRowDTO | None = None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    status: str
    financial_status: str
    fulfillment_status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    tax: str
    shipping: str
    discount: str
    total: str
    created_at: str
    updated_at: str
    email: str | None = None
    note: str | None = None
    customer: CustomerDTO | None = None
    billing_address: AddressDTO | None = None
    shipping_address: AddressDTO | None = None
    cancelled_at: str | None = None
    cancelled_reason: str | None = None


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    total: int
    page: int
    limit: int
    has_next_page: bool
    has_previous_page: bool


@dataclass(frozen=True)
class MovementDTO:
    id: int
    variant_id: str
    kind: str
    quantity: int
    previous_available: int
    previous_reserved: int
    new_available: int
    new_reserved: int
    reason: str
    reference: str
    created_at: str


@dataclass(frozen=True)
class InventorySummaryDTO:
    rows: list[StockRowDTO]
    total_skus: int
    total_on_hand: int
    total_available: int
    total_reserved: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    low_stock_threshold: int
