"""Application service: Show Movements use case (query).

Reads the audit trail back, either for one variant (how did this row reach
its current value?) or for one order (what did this order do to stock?).
"""

from __future__ import annotations

from stockledger.application.dto import MovementDTO
from stockledger.application.mapping import movement_dto
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.audit import ReferenceType
from stockledger.domain.repository.unit_of_work import UnitOfWork


class ShowMovementsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        variant_id: str | None = None,
        order_id: int | None = None,
    ) -> list[MovementDTO]:
        if (variant_id is None) == (order_id is None):
            raise ValidationError("Give exactly one of a variant ID or an order ID")

        with self._uow:
            if variant_id is not None:
                movements = self._uow.movements.list_for_variant(variant_id)
            else:
                movements = self._uow.movements.list_for_reference(
                    ReferenceType.ORDER.value, str(order_id)
                )
        return [movement_dto(m) for m in movements]
