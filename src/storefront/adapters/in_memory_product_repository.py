from __future__ import annotations

from storefront.domain.product import Product
from storefront.ports.product_repository import ProductRepository


class InMemoryProductRepository(ProductRepository):
    """Canonical contract implementation for tests."""

    def __init__(self, products: list[Product]) -> None:
        self._products = {product.id: product for product in products}

    def get_by_id(self, product_id: str) -> Product | None:
        return self._products.get(product_id)
