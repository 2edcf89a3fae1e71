from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.product import Product


class ProductRepository(ABC):
    """Read-only port onto the product catalog (managed elsewhere)."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None: ...
