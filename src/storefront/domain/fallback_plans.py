"""
Hardcoded fallback financing table.

Last-resort affordance for preview widgets when the quote API cannot be
reached: figures may be stale. Never a source of truth, and never used to
compute what gets persisted on an order.
"""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.financing import DEFAULT_DOWN_PCT, FinancingPlan, Quote
from storefront.domain.quoting import best_per_term, build_quote


FALLBACK_PLANS: tuple[FinancingPlan, ...] = (
    FinancingPlan(code=1, description="3 CUOTAS", months=3, surcharge_pct=Decimal("0.30")),
    FinancingPlan(code=2, description="6 CUOTAS", months=6, surcharge_pct=Decimal("0.50")),
    FinancingPlan(code=5, description="6 CUOTAS S/I", months=6, surcharge_pct=Decimal("0.00")),
    FinancingPlan(code=4, description="PROMO 10 CUOTAS", months=10, surcharge_pct=Decimal("0.30")),
    FinancingPlan(code=3, description="12 CUOTAS", months=12, surcharge_pct=Decimal("1.00")),
    FinancingPlan(
        code=10,
        description="12 CUOTAS PRODUCTOS ALTO VALOR",
        months=12,
        surcharge_pct=Decimal("0.50"),
    ),
    FinancingPlan(
        code=11, description="CELU 18 CUOTAS + AURI", months=18, surcharge_pct=Decimal("1.80")
    ),
    FinancingPlan(
        code=6, description="PROMO BICI 18 CUOTAS", months=18, surcharge_pct=Decimal("0.9455")
    ),
)


def local_quote(
    price: Decimal,
    down_pct: Decimal = DEFAULT_DOWN_PCT,
    best_only: bool = False,
) -> Quote:
    """Quote the fallback table with the same engine, ordering and dedup as the live path."""
    items = build_quote(price, down_pct, FALLBACK_PLANS)
    if best_only:
        items = best_per_term(items)
    return Quote(price=price, down_pct=down_pct, items=tuple(items), is_fallback=True)
