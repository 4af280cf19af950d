"""CLI commands for inventory management."""

from __future__ import annotations

import click

from stockledger.application.adjust_inventory import AdjustInventoryHandler
from stockledger.application.get_inventory import GetInventoryForVariantsHandler
from stockledger.application.show_inventory import ShowInventoryHandler
from stockledger.application.show_movements import ShowMovementsHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import settings, unit_of_work

_ROW_HEADER = (
    f"{'Variant':<14} {'Product':<12} {'On hand':>8} {'Reserved':>9} "
    f"{'Committed':>10} {'Available':>10}"
)


def _row_line(row) -> str:
    return (
        f"{row.variant_id:<14} {row.product_id or '-':<12} {row.on_hand:>8} "
        f"{row.reserved:>9} {row.committed:>10} {row.available:>10}"
    )


@click.command("adjust")
@click.option("--variant", "variant_id", required=True, help="Variant ID.")
@click.option(
    "--mode",
    type=click.Choice(["add", "remove", "set"]),
    required=True,
    help="add/remove units, or set the on-hand count.",
)
@click.option("--quantity", required=True, type=int, help="Units to add, remove or set.")
@click.option("--product", "product_id", default=None, help="Product ID for a new row.")
@click.option("--reason", default=None, help="Recorded in the movement history.")
@click.option("--user", "user_id", default=None, help="Who made the adjustment.")
def inventory_adjust(
    variant_id: str,
    mode: str,
    quantity: int,
    product_id: str | None,
    reason: str | None,
    user_id: str | None,
) -> None:
    """Restock, write off or count a variant."""
    handler = AdjustInventoryHandler(unit_of_work())

    try:
        row = handler.handle(
            variant_id, mode, quantity, product_id=product_id, reason=reason, user_id=user_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Inventory for '{row.variant_id}': on hand {row.on_hand}, available {row.available}"
    )


@click.command("show")
def inventory_show() -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(
        unit_of_work(), low_stock_threshold=settings().low_stock_threshold
    )
    summary = handler.handle()

    if not summary.rows:
        click.echo("No inventory records found.")
        return

    click.echo(_ROW_HEADER)
    click.echo("-" * 68)
    for row in summary.rows:
        click.echo(_row_line(row))
    click.echo("-" * 68)
    click.echo(
        f"{summary.total_skus} SKUs  on hand {summary.total_on_hand}  "
        f"available {summary.total_available}  reserved {summary.total_reserved}"
    )
    click.echo(
        f"in stock {summary.in_stock}  low stock (<= {summary.low_stock_threshold}) "
        f"{summary.low_stock}  out of stock {summary.out_of_stock}"
    )


@click.command("lookup")
@click.argument("variant_ids", nargs=-1, required=True)
def inventory_lookup(variant_ids: tuple[str, ...]) -> None:
    """Show stock rows for the given variant IDs."""
    handler = GetInventoryForVariantsHandler(unit_of_work())
    rows = handler.handle(list(variant_ids))

    click.echo(_ROW_HEADER)
    click.echo("-" * 68)
    for variant_id in variant_ids:
        row = rows.get(variant_id)
        if row is None:
            click.echo(f"{variant_id:<14} (not tracked)")
        else:
            click.echo(_row_line(row))


@click.command("history")
@click.option("--variant", "variant_id", default=None, help="Movements for one variant.")
@click.option("--order", "order_id", type=int, default=None, help="Movements caused by one order.")
def inventory_history(variant_id: str | None, order_id: int | None) -> None:
    """Show the inventory movement history."""
    handler = ShowMovementsHandler(unit_of_work())

    try:
        movements = handler.handle(variant_id=variant_id, order_id=order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not movements:
        click.echo("No movements recorded.")
        return

    click.echo(
        f"{'When':<21} {'Variant':<12} {'Type':<20} {'Qty':>5} "
        f"{'Avail':>11} {'Reserved':>11}  Reason"
    )
    click.echo("-" * 100)
    for m in movements:
        avail = f"{m.previous_available}->{m.new_available}"
        reserved = f"{m.previous_reserved}->{m.new_reserved}"
        click.echo(
            f"{m.created_at:<21} {m.variant_id:<12} {m.kind:<20} {m.quantity:>5} "
            f"{avail:>11} {reserved:>11}  {m.reason}"
        )
