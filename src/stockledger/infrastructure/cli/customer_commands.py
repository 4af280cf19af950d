"""CLI commands for customers."""

from __future__ import annotations

import click

from stockledger.application.add_customer import AddCustomerHandler
from stockledger.application.list_customers import ListCustomersHandler
from stockledger.domain.exceptions import DomainException
from stockledger.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.option("--email", default=None)
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@click.option("--phone", default=None)
def customer_add(
    email: str | None, first_name: str | None, last_name: str | None, phone: str | None
) -> None:
    """Register a customer."""
    handler = AddCustomerHandler(unit_of_work())

    try:
        dto = handler.handle(
            email=email, first_name=first_name, last_name=last_name, phone=phone
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer #{dto.id} added: {dto.name}")


@click.command("list")
@click.option("--search", default="", help="Match email, name or phone.")
def customer_list(search: str) -> None:
    """List customers with their order counts and spend."""
    customers = ListCustomersHandler(unit_of_work()).handle(search=search)

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':>4}  {'Name':<24} {'Email':<28} {'Orders':>6} {'Spent':>10}")
    click.echo("-" * 78)
    for c in customers:
        click.echo(
            f"{c.id:>4}  {c.name[:24]:<24} {(c.email or '-')[:28]:<28} "
            f"{c.orders_count:>6} {c.total_spent:>10}"
        )
