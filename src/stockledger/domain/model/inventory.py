"""StockRow aggregate: the per-variant counters of the stock ledger.

Each stocked variant has one row holding four integers.  ``available`` is
persisted alongside the others but is always derived from them:

    available == on_hand - reserved - committed

``reserved`` and ``committed`` are twin earmark counters.  Every order
operation moves them together, so one held unit lowers ``available`` by two.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from stockledger.domain.exceptions import ValidationError


@dataclass(frozen=True)
class StockSnapshot:
    """Immutable view of a row's counters at one instant."""

    on_hand: int
    reserved: int
    committed: int
    available: int


@dataclass(frozen=True)
class StockChange:
    """Before/after pair returned by every ledger mutation."""

    variant_id: str
    product_id: str | None
    previous: StockSnapshot
    new: StockSnapshot


@dataclass
class StockRow:
    """Aggregate root for one variant's stock counters.

    Invariants (after every ``apply_delta``):
    - ``on_hand``, ``reserved`` and ``committed`` are >= 0
    - ``available == on_hand - reserved - committed``
    """

    variant_id: str
    on_hand: int
    reserved: int = 0
    committed: int = 0
    available: int | None = None
    product_id: str | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.available is None:
            self.available = self.sellable

    @property
    def sellable(self) -> int:
        """Availability recomputed from the counters, ignoring the stored copy."""
        return self.on_hand - self.reserved - self.committed

    def snapshot(self) -> StockSnapshot:
        return StockSnapshot(
            on_hand=self.on_hand,
            reserved=self.reserved,
            committed=self.committed,
            available=self.available,  # type: ignore[arg-type]
        )

    def apply_delta(
        self,
        reserved_delta: int = 0,
        committed_delta: int = 0,
        on_hand_delta: int = 0,
    ) -> StockChange:
        """Shift the counters and recompute ``available``.

        Pure bookkeeping: whether the shift is allowed is decided by the
        caller before this runs.  ``reserved`` and ``committed`` are floored
        at zero; ``on_hand`` going negative is refused outright.
        """
        previous = self.snapshot()

        new_on_hand = self.on_hand + on_hand_delta
        if new_on_hand < 0:
            raise ValidationError(
                f"On-hand for variant {self.variant_id} cannot drop below zero "
                f"({self.on_hand} {on_hand_delta:+d})"
            )

        self.on_hand = new_on_hand
        self.reserved = max(0, self.reserved + reserved_delta)
        self.committed = max(0, self.committed + committed_delta)
        self.available = self.sellable
        self.updated_at = datetime.now(timezone.utc)

        return StockChange(
            variant_id=self.variant_id,
            product_id=self.product_id,
            previous=previous,
            new=self.snapshot(),
        )
