"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from stockledger.application.dto import InventorySummaryDTO
from stockledger.application.mapping import stock_row_dto
from stockledger.domain.repository.unit_of_work import UnitOfWork


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = 10) -> None:
        self._uow = uow
        self._low_stock_threshold = low_stock_threshold

    def handle(self) -> InventorySummaryDTO:
        with self._uow:
            rows = sorted(self._uow.inventory.list_all(), key=lambda r: r.variant_id)

        threshold = self._low_stock_threshold
        available = [row.available or 0 for row in rows]
        return InventorySummaryDTO(
            rows=[stock_row_dto(row) for row in rows],
            total_skus=len(rows),
            total_on_hand=sum(row.on_hand for row in rows),
            total_available=sum(available),
            total_reserved=sum(row.reserved for row in rows),
            in_stock=sum(1 for a in available if a > 0),
            low_stock=sum(1 for a in available if 0 < a <= threshold),
            out_of_stock=sum(1 for a in available if a <= 0),
            low_stock_threshold=threshold,
        )
