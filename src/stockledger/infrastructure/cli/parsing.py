"""Parsing of the ``key=value,key=value`` option strings used by the CLI."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from stockledger.application.dto import AddressSpec, LineItemSpec, TotalsSpec

_ITEM_KEYS = {
    "title": "title",
    "qty": "quantity",
    "quantity": "quantity",
    "price": "price",
    "product": "product_id",
    "variant": "variant_id",
    "sku": "sku",
    "variant_title": "variant_title",
    "id": "id",
}

_ADDRESS_KEYS = {
    "first_name", "last_name", "company", "address1", "address2",
    "city", "state", "zip", "country", "phone",
}


def parse_pairs(raw: str) -> dict[str, str]:
    """Parse 'a=1,b=2' into {'a': '1', 'b': '2'}."""
    pairs: dict[str, str] = {}
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        if "=" not in chunk:
            raise click.BadParameter(f"Invalid field '{chunk}'. Expected 'key=value'.")
        key, value = chunk.split("=", 1)
        pairs[key.strip().lower()] = value.strip()
    return pairs


def parse_item(raw: str) -> LineItemSpec:
    fields: dict[str, str] = {}
    for key, value in parse_pairs(raw).items():
        if key not in _ITEM_KEYS:
            raise click.BadParameter(f"Unknown item field '{key}' in '{raw}'.")
        fields[_ITEM_KEYS[key]] = value

    for required in ("title", "quantity", "price"):
        if required not in fields:
            raise click.BadParameter(f"Item '{raw}' is missing '{required}'.")
    try:
        quantity = int(fields.pop("quantity"))
    except ValueError:
        raise click.BadParameter(f"Invalid quantity in item '{raw}'.")
    return LineItemSpec(quantity=quantity, **fields)


def parse_items(raw_items: tuple[str, ...]) -> list[LineItemSpec]:
    return [parse_item(raw) for raw in raw_items]


def parse_address(raw: str | None) -> AddressSpec | None:
    if not raw:
        return None
    fields = parse_pairs(raw)
    unknown = set(fields) - _ADDRESS_KEYS
    if unknown:
        raise click.BadParameter(f"Unknown address field(s): {', '.join(sorted(unknown))}.")
    for required in ("address1", "city", "country"):
        fields.setdefault(required, "")
    return AddressSpec(**fields)


def parse_totals(
    items: list[LineItemSpec],
    subtotal: str | None,
    tax: str | None,
    shipping: str | None,
    discount: str | None,
    total: str | None,
) -> TotalsSpec | None:
    """Caller-supplied totals; ``None`` when nothing was given."""
    if all(v is None for v in (subtotal, tax, shipping, discount, total)):
        return None
    if subtotal is None:
        try:
            subtotal = str(sum((Decimal(i.price) * i.quantity for i in items), Decimal("0")))
        except InvalidOperation:
            raise click.BadParameter("Invalid price in items.")
    return TotalsSpec(
        subtotal=subtotal,
        tax=tax or "0",
        shipping=shipping or "0",
        discount=discount or "0",
        total=total,
    )
