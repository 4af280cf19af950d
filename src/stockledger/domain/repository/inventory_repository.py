"""Abstract repository for StockRow aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.model.inventory import StockRow


class InventoryRepository(ABC):

    @abstractmethod
    def get(self, variant_id: str) -> StockRow | None:
        """Return the stock row for a variant, or None."""

    @abstractmethod
    def list_all(self) -> list[StockRow]:
        """Return every stock row."""

    @abstractmethod
    def save(self, row: StockRow) -> None:
        """Persist a new or updated stock row."""

    def get_many(self, variant_ids: list[str]) -> dict[str, StockRow]:
        """Batch fetch; variants without a row are left out of the result."""
        rows: dict[str, StockRow] = {}
        for variant_id in variant_ids:
            row = self.get(variant_id)
            if row is not None:
                rows[variant_id] = row
        return rows
