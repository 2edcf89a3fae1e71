from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.financing import ProductFinancingConfig


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    title: str
    price: Decimal
    category: str
    sales_price: Decimal | None = None
    subcategory: str | None = None
    stock: int = 0
    financing: ProductFinancingConfig | None = None

    @property
    def unit_price(self) -> Decimal:
        """Sale price when one is set, list price otherwise."""
        return self.sales_price if self.sales_price is not None else self.price
