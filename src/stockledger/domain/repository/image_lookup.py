"""Read-only port onto catalog media, used to decorate order line items."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ImageLookup(ABC):

    @abstractmethod
    def variant_image(self, variant_id: str) -> str | None:
        """Primary image URL of a variant, if it has one."""

    @abstractmethod
    def product_image(self, product_id: str) -> str | None:
        """Primary image URL of a product, if it has one."""

    def image_for(self, variant_id: str | None, product_id: str | None) -> str | None:
        """Variant image first, falling back to the product's."""
        url = self.variant_image(variant_id) if variant_id else None
        if not url and product_id:
            url = self.product_image(product_id)
        return url
