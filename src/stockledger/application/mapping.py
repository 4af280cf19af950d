"""Conversions between input specs, domain objects and output DTOs.

Shared by every order handler so a created, edited, cancelled or fulfilled
order is always rendered the same way.
"""

from __future__ import annotations

from datetime import datetime

from stockledger.application.dto import (
    AddressDTO,
    AddressSpec,
    CustomerDTO,
    LineItemSpec,
    MovementDTO,
    OrderDTO,
    OrderLineItemDTO,
    StockRowDTO,
    TotalsSpec,
)
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.audit import InventoryMovement
from stockledger.domain.model.customer import Customer
from stockledger.domain.model.inventory import StockRow
from stockledger.domain.model.order import (
    Address,
    AddressType,
    Order,
    OrderLineItem,
    OrderTotals,
    new_line_item_id,
)
from stockledger.domain.model.value_objects import Money, Quantity
from stockledger.domain.repository.unit_of_work import UnitOfWork

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


# --- Specs -> domain ----------------------------------------------------------


def build_line_items(specs: list[LineItemSpec]) -> list[OrderLineItem]:
    """Snapshot title, sku and price into fresh line items.

    Each variant may appear on one line only; stock is reconciled per variant.
    """
    seen: set[str] = set()
    for spec in specs:
        if not spec.variant_id:
            continue
        if spec.variant_id in seen:
            raise ValidationError(
                f"Variant {spec.variant_id} appears on more than one line; "
                "combine them into one line"
            )
        seen.add(spec.variant_id)

    return [
        OrderLineItem(
            id=spec.id or new_line_item_id(),
            title=spec.title.strip() if spec.title else spec.title,
            quantity=Quantity(spec.quantity),
            unit_price=Money.of(spec.price),
            product_id=spec.product_id or None,
            variant_id=spec.variant_id or None,
            sku=spec.sku or None,
            variant_title=spec.variant_title or None,
        )
        for spec in specs
    ]


def build_totals(spec: TotalsSpec | None, items: list[OrderLineItem]) -> OrderTotals:
    """Caller totals are stored as given; only a missing total is derived."""
    if spec is None:
        return OrderTotals.for_items(items)
    subtotal = Money.of(spec.subtotal)
    tax = Money.of(spec.tax)
    shipping = Money.of(spec.shipping)
    discount = Money.of(spec.discount)
    if spec.total is None:
        return OrderTotals.compute(subtotal, tax=tax, shipping=shipping, discount=discount)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=Money.of(spec.total),
    )


def build_address(spec: AddressSpec | None, kind: AddressType) -> Address | None:
    if spec is None:
        return None
    return Address(
        type=kind,
        address1=spec.address1,
        city=spec.city,
        country=spec.country,
        first_name=spec.first_name,
        last_name=spec.last_name,
        company=spec.company,
        address2=spec.address2,
        state=spec.state,
        zip=spec.zip,
        phone=spec.phone,
    )


# --- Domain -> DTOs -----------------------------------------------------------


def stock_row_dto(row: StockRow) -> StockRowDTO:
    return StockRowDTO(
        variant_id=row.variant_id,
        product_id=row.product_id,
        on_hand=row.on_hand,
        reserved=row.reserved,
        committed=row.committed,
        available=row.available,  # type: ignore[arg-type]
    )


def customer_dto(customer: Customer) -> CustomerDTO:
    return CustomerDTO(
        id=customer.id,  # type: ignore[arg-type]
        name=customer.display_name,
        email=customer.email,
        phone=customer.phone,
        orders_count=customer.orders_count,
        total_spent=str(customer.total_spent),
    )


def address_dto(address: Address | None) -> AddressDTO | None:
    if address is None:
        return None
    name = " ".join(p for p in (address.first_name, address.last_name) if p)
    locality = " ".join(p for p in (address.zip, address.city) if p)
    lines = [
        name,
        address.company,
        address.address1,
        address.address2,
        locality,
        address.state,
        address.country,
        address.phone,
    ]
    return AddressDTO(type=address.type.value, lines=[line for line in lines if line])


def movement_dto(movement: InventoryMovement) -> MovementDTO:
    reference = movement.reference_type.value
    if movement.reference_id:
        reference = f"{reference}:{movement.reference_id}"
    return MovementDTO(
        id=movement.id,
        variant_id=movement.variant_id,
        kind=movement.kind.value,
        quantity=movement.quantity,
        previous_available=movement.previous_available,
        previous_reserved=movement.previous_reserved,
        new_available=movement.new_available,
        new_reserved=movement.new_reserved,
        reason=movement.reason,
        reference=reference,
        created_at=_fmt(movement.created_at),
    )


def order_summary_dto(order: Order, customer: Customer | None = None) -> OrderDTO:
    """Header-level view used by list pages; items carry no stock or image."""
    return _order_dto(
        order,
        customer,
        [_line_dto(item) for item in order.items],
    )


def order_detail_dto(uow: UnitOfWork, order: Order) -> OrderDTO:
    """Full view: customer, addresses, and each line's image and stock row."""
    customer = (
        uow.customers.get_by_id(order.customer_id)
        if order.customer_id is not None
        else None
    )
    stock = uow.inventory.get_many(
        [item.variant_id for item in order.items if item.variant_id]
    )
    items = [
        _line_dto(
            item,
            image_url=uow.images.image_for(item.variant_id, item.product_id),
            inventory=stock.get(item.variant_id) if item.variant_id else None,
        )
        for item in order.items
    ]
    return _order_dto(order, customer, items)


def _line_dto(
    item: OrderLineItem,
    image_url: str | None = None,
    inventory: StockRow | None = None,
) -> OrderLineItemDTO:
    return OrderLineItemDTO(
        id=item.id,
        title=item.title,
        quantity=item.quantity.value,
        unit_price=str(item.unit_price),
        line_total=str(item.line_total),
        sku=item.sku,
        variant_title=item.variant_title,
        product_id=item.product_id,
        variant_id=item.variant_id,
        image_url=image_url,
        inventory=stock_row_dto(inventory) if inventory is not None else None,
    )


def _order_dto(
    order: Order,
    customer: Customer | None,
    items: list[OrderLineItemDTO],
) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        order_number=order.order_number,
        status=order.status.value,
        financial_status=order.financial_status.value,
        fulfillment_status=order.fulfillment_status.value,
        items=items,
        subtotal=str(order.totals.subtotal),
        tax=str(order.totals.tax),
        shipping=str(order.totals.shipping),
        discount=str(order.totals.discount),
        total=str(order.totals.total),
        created_at=_fmt(order.created_at),
        updated_at=_fmt(order.updated_at),
        email=order.email,
        note=order.note,
        customer=customer_dto(customer) if customer is not None else None,
        billing_address=address_dto(order.billing_address),
        shipping_address=address_dto(order.shipping_address),
        cancelled_at=_fmt(order.cancelled_at) if order.cancelled_at else None,
        cancelled_reason=order.cancelled_reason,
    )


def _fmt(moment: datetime) -> str:
    return moment.strftime(_TIMESTAMP)
