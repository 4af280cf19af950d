"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from stockledger.application.cancel_order import CancelOrderHandler
from stockledger.application.create_order import CreateOrderHandler
from stockledger.application.dto import OrderDTO
from stockledger.application.fulfill_order import FulfillOrderHandler
from stockledger.application.list_orders import DEFAULT_PAGE_SIZE, ListOrdersHandler
from stockledger.application.show_order import ShowOrderHandler
from stockledger.application.update_order import UpdateOrderHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import unit_of_work
from stockledger.infrastructure.cli.parsing import parse_address, parse_items, parse_totals

_ITEM_HELP = "Line item as 'title=Tee,qty=2,price=19.99,variant=v1,product=p1,sku=TS-1'."


def _totals_options(func):
    for name in ("total", "discount", "shipping", "tax", "subtotal"):
        func = click.option(f"--{name}", default=None, help=f"Order {name} (decimal).")(func)
    return func


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(
        f"Order {dto.order_number} (id={dto.id})  status={dto.status}  "
        f"payment={dto.financial_status}  fulfillment={dto.fulfillment_status}"
    )
    if dto.customer is not None:
        click.echo(f"Customer: {dto.customer.name} ({dto.customer.email or '-'})")
    elif dto.email:
        click.echo(f"Email:    {dto.email}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.cancelled_at:
        reason = f"  ({dto.cancelled_reason})" if dto.cancelled_reason else ""
        click.echo(f"Cancelled: {dto.cancelled_at}{reason}")
    if dto.note:
        click.echo(f"Note:     {dto.note}")
    for address in (dto.billing_address, dto.shipping_address):
        if address is not None:
            click.echo(f"{address.type.capitalize()}: {', '.join(address.lines)}")
    click.echo()

    click.echo(
        f"  {'Item':<24} {'Variant':<10} {'Qty':>5} {'Price':>10} {'Total':>10} {'Avail':>6}"
    )
    click.echo(f"  {'-'*70}")
    for item in dto.items:
        avail = item.inventory.available if item.inventory is not None else "-"
        click.echo(
            f"  {item.title:<24} {item.variant_id or '-':<10} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10} {avail:>6}"
        )
    click.echo(f"  {'-'*70}")
    for label, value in (
        ("Subtotal", dto.subtotal),
        ("Tax", dto.tax),
        ("Shipping", dto.shipping),
        ("Discount", dto.discount),
        ("Order Total", dto.total),
    ):
        click.echo(f"  {label:<27} {value:>30}")


@click.command("create")
@click.option("--item", "items", multiple=True, required=True, help=_ITEM_HELP)
@click.option("--customer-id", type=int, default=None, help="Existing customer ID.")
@click.option("--email", default=None, help="Contact email for the order.")
@click.option("--note", default=None, help="Free-text note.")
@click.option("--shipping-method", default=None, help="Shipping method ID.")
@click.option("--payment-method", default=None, help="Payment method ID.")
@click.option("--bill-to", default=None, help="Billing address as 'address1=..,city=..,country=..'.")
@click.option("--ship-to", default=None, help="Shipping address as 'address1=..,city=..,country=..'.")
@_totals_options
def order_create(
    items: tuple[str, ...],
    customer_id: int | None,
    email: str | None,
    note: str | None,
    shipping_method: str | None,
    payment_method: str | None,
    bill_to: str | None,
    ship_to: str | None,
    subtotal: str | None,
    tax: str | None,
    shipping: str | None,
    discount: str | None,
    total: str | None,
) -> None:
    """Create a pending order and reserve its stock."""
    specs = parse_items(items)
    totals = parse_totals(specs, subtotal, tax, shipping, discount, total)

    handler = CreateOrderHandler(unit_of_work())
    try:
        dto = handler.handle(
            items=specs,
            totals=totals,
            customer_id=customer_id,
            email=email,
            note=note,
            shipping_method_id=shipping_method,
            payment_method_id=payment_method,
            billing_address=parse_address(bill_to),
            shipping_address=parse_address(ship_to),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created")
    click.echo()
    _display_order(dto)


@click.command("edit")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to edit.")
@click.option("--item", "items", multiple=True, help=_ITEM_HELP + " Add 'id=' to keep a line.")
@click.option("--note", default=None, help="Replacement note.")
@_totals_options
def order_edit(
    order_id: int,
    items: tuple[str, ...],
    note: str | None,
    subtotal: str | None,
    tax: str | None,
    shipping: str | None,
    discount: str | None,
    total: str | None,
) -> None:
    """Replace an order's items; stock is reconciled against the old ones."""
    specs = parse_items(items)
    totals = parse_totals(specs, subtotal, tax, shipping, discount, total)

    handler = UpdateOrderHandler(unit_of_work())
    try:
        dto = handler.handle(order_id, specs, totals=totals, note=note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} updated")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--search", default="", help="Match order number, email or customer name.")
@click.option("--status", default=None, help="pending, fulfilled or cancelled.")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=DEFAULT_PAGE_SIZE, type=int, show_default=True)
def order_list(search: str, status: str | None, page: int, limit: int) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(unit_of_work())

    try:
        result = handler.handle(search=search, status=status, page=page, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(
        f"{'Number':<10} {'Status':<10} {'Payment':<9} {'Customer':<22} {'Items':>5} {'Total':>10}"
    )
    click.echo("-" * 71)
    for dto in result.orders:
        who = dto.customer.name if dto.customer is not None else (dto.email or "-")
        click.echo(
            f"{dto.order_number:<10} {dto.status:<10} {dto.financial_status:<9} "
            f"{who[:22]:<22} {len(dto.items):>5} {dto.total:>10}"
        )
    click.echo("-" * 71)
    click.echo(f"Page {result.page} ({len(result.orders)} of {result.total})")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", default=None, help="Why the order was cancelled.")
def order_cancel(order_id: int, reason: str | None) -> None:
    """Cancel an order and release its reserved stock."""
    handler = CancelOrderHandler(unit_of_work())

    try:
        dto = handler.handle(order_id, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} cancelled  (payment={dto.financial_status})")


@click.command("fulfill")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to fulfill.")
def order_fulfill(order_id: int) -> None:
    """Ship an order: consume its stock and mark it fulfilled."""
    handler = FulfillOrderHandler(unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} fulfilled  (total={dto.total})")
