"""ImageLookup over the ``media`` table of the JSON store.

The table is written by the catalog side; this ledger only reads it:

    {"variants": {"<variant id>": "<url>"}, "products": {"<product id>": "<url>"}}
"""

from __future__ import annotations

from typing import Any

from stockledger.domain.repository.image_lookup import ImageLookup


class JsonImageLookup(ImageLookup):

    def __init__(self, document: dict[str, Any]) -> None:
        media = document.get("media") or {}
        self._variants: dict[str, str] = media.get("variants") or {}
        self._products: dict[str, str] = media.get("products") or {}

    def variant_image(self, variant_id: str) -> str | None:
        return self._variants.get(variant_id)

    def product_image(self, product_id: str) -> str | None:
        return self._products.get(product_id)
