"""Application service: Adjust Inventory use case.

Manual restocks, write-offs and stock counts.  Unlike order operations these
change on-hand directly; reservations are left alone.
"""

from __future__ import annotations

from stockledger.application.dto import StockRowDTO
from stockledger.application.mapping import stock_row_dto
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.audit_trail import AuditTrail
from stockledger.domain.service.stock_ledger import AdjustmentMode, StockLedger


class AdjustInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        variant_id: str,
        mode: str,
        quantity: int,
        product_id: str | None = None,
        reason: str | None = None,
        user_id: str | None = None,
    ) -> StockRowDTO:
        if not variant_id or not variant_id.strip():
            raise ValidationError("Variant ID is required")
        try:
            adjustment = AdjustmentMode(mode)
        except ValueError:
            raise ValidationError(
                f"Unknown adjustment '{mode}' (expected add, remove or set)"
            )

        with self._uow:
            ledger = StockLedger(self._uow.inventory, AuditTrail(self._uow.movements))
            ledger.adjust(
                variant_id,
                adjustment,
                quantity,
                product_id=product_id,
                reason=reason,
                user_id=user_id,
            )
            row = ledger.require(variant_id)
            self._uow.commit()
        return stock_row_dto(row)
