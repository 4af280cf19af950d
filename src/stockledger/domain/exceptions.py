"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientInventory(ValidationError):
    """Requested quantity exceeds what the stock row can currently give."""

    def __init__(self, title: str, available: int, required: int) -> None:
        self.title = title
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient inventory for {title}. "
            f"Available: {available}, Required: {required}"
        )


class OrderNotFound(EntityNotFoundError):

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(f"Order #{order_id} not found")


class VariantStockNotFound(EntityNotFoundError):

    def __init__(self, variant_id: str, title: str | None = None) -> None:
        self.variant_id = variant_id
        self.title = title
        label = f" ({title})" if title else ""
        super().__init__(f"Inventory not found for variant {variant_id}{label}")


class CustomerNotFound(EntityNotFoundError):

    def __init__(self, customer_id: int) -> None:
        self.customer_id = customer_id
        super().__init__(f"Customer #{customer_id} not found")


class OrderAlreadyFulfilled(ValidationError):

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Order {order_number} is already fulfilled")


class OrderCancelled(ValidationError):

    def __init__(self, order_number: str) -> None:
        super().__init__(f"Cannot fulfill a cancelled order ({order_number})")
