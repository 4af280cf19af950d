"""Customer aggregate: only the lifetime figures this ledger maintains.

Profile management lives elsewhere; here the customer exists so fulfilled
orders can roll up into ``orders_count`` and ``total_spent``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.value_objects import Money


@dataclass
class Customer:

    id: int | None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    orders_count: int = 0
    total_spent: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> Customer:
        email = (email or "").strip() or None
        if email is not None and ("@" not in email or email.startswith("@")):
            raise ValidationError(f"Invalid email address: {email!r}")
        if not any((email, first_name, last_name, phone)):
            raise ValidationError("Customer needs at least an email, a name or a phone")
        return Customer(
            id=None,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )

    @property
    def display_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.email or f"Customer #{self.id}"

    def record_fulfilled_order(self, order_total: Money) -> None:
        """Roll a fulfilled order into the lifetime aggregates.

        Both figures only ever grow; nothing in the ledger decrements them.
        """
        self.orders_count += 1
        self.total_spent = self.total_spent + order_total
        self.updated_at = datetime.now(timezone.utc)
