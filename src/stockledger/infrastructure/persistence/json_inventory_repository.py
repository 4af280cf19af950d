"""JSON-document-backed implementation of InventoryRepository."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from stockledger.domain.model.inventory import StockRow
from stockledger.domain.repository.inventory_repository import InventoryRepository


class JsonInventoryRepository(InventoryRepository):

    def __init__(self, document: dict[str, Any]) -> None:
        self._records: list[dict] = document.setdefault("inventory", [])

    # --- InventoryRepository interface ----------------------------------------

    def get(self, variant_id: str) -> StockRow | None:
        for raw in self._records:
            if raw["variant_id"] == variant_id:
                return self._to_domain(raw)
        return None

    def get_many(self, variant_ids: list[str]) -> dict[str, StockRow]:
        wanted = set(variant_ids)
        return {
            raw["variant_id"]: self._to_domain(raw)
            for raw in self._records
            if raw["variant_id"] in wanted
        }

    def list_all(self) -> list[StockRow]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, row: StockRow) -> None:
        raw = self._to_raw(row)
        for i, existing in enumerate(self._records):
            if existing["variant_id"] == row.variant_id:
                self._records[i] = raw
                return
        self._records.append(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(row: StockRow) -> dict:
        return {
            "variant_id": row.variant_id,
            "product_id": row.product_id,
            "on_hand": row.on_hand,
            "reserved": row.reserved,
            "committed": row.committed,
            "available": row.available,
            "updated_at": row.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockRow:
        kwargs = {}
        if raw.get("updated_at"):
            kwargs["updated_at"] = datetime.fromisoformat(raw["updated_at"])
        return StockRow(
            variant_id=raw["variant_id"],
            product_id=raw.get("product_id"),
            on_hand=raw.get("on_hand", 0),
            reserved=raw.get("reserved", 0),
            committed=raw.get("committed", 0),
            available=raw.get("available"),
            **kwargs,
        )
