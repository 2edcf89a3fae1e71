from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from storefront.domain.financing import QuoteItem


@dataclass(frozen=True, slots=True)
class CartLine:
    item_id: str
    name: str
    price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """
    Everything needed to write the checkout message.

    selections maps cart item id to the chosen quote item; None, or an
    absent key, means the line is paid cash.
    """

    customer_name: str
    lines: tuple[CartLine, ...]
    selections: Mapping[str, QuoteItem | None] = field(default_factory=dict)
    needs_shipping: bool = False
    address: str | None = None


@dataclass(frozen=True, slots=True)
class CheckoutMessage:
    text: str
    url: str
    subtotal: Decimal
    shipping: Decimal
    total: Decimal
