"""Domain service: Inventory Reservation.

Translates order lifecycle events into ledger deltas and audit records:

    create   reserve   (+q reserved, +q committed)
    edit     diff old items against new ones, reserve or release the change
    cancel   release   (-q reserved, -q committed)
    fulfill  consume   (-q on-hand, -q reserved, -q committed)

Every availability check happens immediately before the mutation it guards.
Items without a variant never touch stock.  Variants without a stock row are
untracked and skipped, except on fulfillment where a missing row is fatal.

Nothing here is atomic on its own; the caller wraps each operation in a
unit of work so a failure on one line discards the earlier lines' writes.
"""

from __future__ import annotations

import structlog

from stockledger.domain.exceptions import InsufficientInventory
from stockledger.domain.model.audit import MovementKind, ReferenceType
from stockledger.domain.model.inventory import StockChange
from stockledger.domain.model.order import Order, OrderLineItem
from stockledger.domain.repository.inventory_repository import InventoryRepository
from stockledger.domain.repository.movement_repository import MovementRepository
from stockledger.domain.service.audit_trail import AuditTrail
from stockledger.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class InventoryReservationService:

    def __init__(self, ledger: StockLedger, audit: AuditTrail) -> None:
        self._ledger = ledger
        self._audit = audit

    @staticmethod
    def build(
        inventory: InventoryRepository, movements: MovementRepository
    ) -> InventoryReservationService:
        audit = AuditTrail(movements)
        return InventoryReservationService(StockLedger(inventory, audit), audit)

    def reserve_for_order(self, order: Order) -> None:
        """Reserve every stocked line of a freshly created order."""
        for line in order.stocked_items:
            self._reserve(order, line, f"Order created: {order.order_number}")

    def reconcile_edit(
        self,
        order: Order,
        existing: list[OrderLineItem],
        desired: list[OrderLineItem],
    ) -> None:
        """Move stock so reservations match ``desired`` instead of ``existing``.

        Lines are matched by ``OrderLineItem.key`` (variant, else product, else
        line id).  A line that swaps its variant therefore shows up as one
        removal plus one addition, never as a quantity change.
        """
        existing_by_key = {item.key: item for item in existing}
        desired_by_key = {item.key: item for item in desired}

        # Release pass: removed lines and quantity changes on kept lines.
        for old in existing:
            if not old.is_stocked:
                continue
            new = desired_by_key.get(old.key)
            if new is None:
                self._release(
                    order, old, old.quantity.value,
                    f"Order item removed: Order {order.id}",
                )
            elif new.quantity.value != old.quantity.value:
                diff = new.quantity.value - old.quantity.value
                self._shift(order, old, new.title, diff)

        # Reserve pass: lines that did not exist before.
        for new in desired:
            if new.is_stocked and new.key not in existing_by_key:
                self._reserve(order, new, f"Order item added: Order {order.id}")

    def release_for_order(self, order: Order) -> None:
        """Give back the full quantity of every stocked line."""
        for line in order.stocked_items:
            self._release(
                order, line, line.quantity.value,
                f"Order cancelled: {order.order_number}",
            )

    def consume_for_order(self, order: Order) -> None:
        """Turn reservations into permanent on-hand decrements.

        A stocked line whose variant has no row aborts the operation, as does
        a line asking for more than is physically on hand.
        """
        for line in order.stocked_items:
            qty = line.quantity.value
            row = self._ledger.require(line.variant_id, line.title)  # type: ignore[arg-type]
            if row.on_hand < qty:
                raise InsufficientInventory(line.title, available=row.on_hand, required=qty)

            change = self._ledger.apply_delta(
                row.variant_id,
                reserved_delta=-qty,
                committed_delta=-qty,
                on_hand_delta=-qty,
            )
            self._write_audit(
                order, line, change, MovementKind.FULFILLMENT, -qty,
                f"Order fulfillment: {order.order_number}",
            )

    # --- Internal helpers -----------------------------------------------------

    def _reserve(self, order: Order, line: OrderLineItem, reason: str) -> None:
        row = self._ledger.find(line.variant_id)  # type: ignore[arg-type]
        if row is None:
            logger.info(
                "Variant has no stock row; reservation skipped",
                order_number=order.order_number,
                variant_id=line.variant_id,
            )
            return

        qty = line.quantity.value
        self._ledger.ensure_available(row, qty, line.title)
        change = self._ledger.apply_delta(
            row.variant_id, reserved_delta=qty, committed_delta=qty
        )
        self._write_audit(order, line, change, MovementKind.RESERVATION, qty, reason)

    def _release(
        self, order: Order, line: OrderLineItem, qty: int, reason: str
    ) -> None:
        row = self._ledger.find(line.variant_id)  # type: ignore[arg-type]
        if row is None:
            return
        change = self._ledger.apply_delta(
            row.variant_id, reserved_delta=-qty, committed_delta=-qty
        )
        self._write_audit(order, line, change, MovementKind.CANCELLATION, -qty, reason)

    def _shift(self, order: Order, line: OrderLineItem, title: str, diff: int) -> None:
        row = self._ledger.find(line.variant_id)  # type: ignore[arg-type]
        if row is None:
            return
        if diff > 0:
            self._ledger.ensure_available(row, diff, title)
        change = self._ledger.apply_delta(
            row.variant_id, reserved_delta=diff, committed_delta=diff
        )
        kind = MovementKind.RESERVATION if diff > 0 else MovementKind.CANCELLATION
        self._write_audit(
            order, line, change, kind, diff,
            f"Order item quantity changed: Order {order.id}",
        )

    def _write_audit(
        self,
        order: Order,
        line: OrderLineItem,
        change: StockChange,
        kind: MovementKind,
        quantity: int,
        reason: str,
    ) -> None:
        self._audit.record(
            change,
            kind=kind,
            quantity=quantity,
            reason=reason,
            reference_type=ReferenceType.ORDER,
            reference_id=str(order.id),
            product_id=line.product_id,
        )
        logger.info(
            "Inventory movement recorded",
            order_number=order.order_number,
            variant_id=change.variant_id,
            kind=kind.value,
            quantity=quantity,
            available=change.new.available,
        )
