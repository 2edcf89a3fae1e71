"""Quote financing for a catalog product, honouring its financing config."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.eligibility import resolve_product_selection
from storefront.domain.errors import NotFoundError
from storefront.domain.financing import DEFAULT_DOWN_PCT, Quote, QuoteRequest
from storefront.ports.financing_group_repository import FinancingGroupRepository
from storefront.ports.financing_plan_repository import FinancingPlanRepository
from storefront.ports.product_repository import ProductRepository
from storefront.use_cases.quote_financing import QuoteFinancing


@dataclass(frozen=True, slots=True)
class QuoteProductFinancingRequest:
    product_id: str
    best_only: bool = True


class QuoteProductFinancing:
    """
    Product card preview and cart selector quotes.

    Resolves the product's mode (inherit / override / disabled), its
    down payment override and category, then delegates to QuoteFinancing
    so the math and ordering are the same as the public quote endpoint.
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        plan_repository: FinancingPlanRepository,
        default_down_pct: Decimal = DEFAULT_DOWN_PCT,
        group_repository: FinancingGroupRepository | None = None,
    ) -> None:
        self._product_repository = product_repository
        self._quote_financing = QuoteFinancing(plan_repository, group_repository)
        self._default_down_pct = default_down_pct

    def execute(self, request: QuoteProductFinancingRequest) -> Quote:
        """
        Raises:
            NotFoundError: If the product does not exist
        """
        product = self._product_repository.get_by_id(request.product_id)
        if product is None:
            raise NotFoundError(resource="Product", identifier=request.product_id)

        selection = resolve_product_selection(product.financing, self._default_down_pct)
        if not selection.offered:
            return Quote(price=product.unit_price, down_pct=selection.down_pct)

        return self._quote_financing.execute(
            QuoteRequest(
                price=product.unit_price,
                down_pct=selection.down_pct,
                plan_ids=selection.plan_ids,
                group_key=selection.group_key,
                category=product.category,
            ),
            best_only=request.best_only,
        )
