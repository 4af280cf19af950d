"""Application service: Inventory Lookup use case (query).

Batch fetch of stock rows for the variants shown in an order editor, so it
can hint how many more units can be added.
"""

from __future__ import annotations

from stockledger.application.dto import StockRowDTO
from stockledger.application.mapping import stock_row_dto
from stockledger.domain.repository.unit_of_work import UnitOfWork


class GetInventoryForVariantsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, variant_ids: list[str]) -> dict[str, StockRowDTO]:
        """Map each known variant id to its row; unknown ids are omitted."""
        if not variant_ids:
            return {}
        with self._uow:
            rows = self._uow.inventory.get_many(list(dict.fromkeys(variant_ids)))
        return {variant_id: stock_row_dto(row) for variant_id, row in rows.items()}
