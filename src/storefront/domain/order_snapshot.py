from __future__ import annotations

from decimal import Decimal

from storefront.domain.eligibility import PlanSelection
from storefront.domain.financing import FinancingPlan
from storefront.domain.order import OrderItemFinancingSnapshot
from storefront.domain.quoting import compute_quote_item


def build_financing_snapshot(
    plan: FinancingPlan,
    selection: PlanSelection,
    sub_total: Decimal,
    group_key: str | None,
) -> OrderItemFinancingSnapshot:
    """
    Freeze the financing terms of one order line.

    Uses the quote engine formula against the line subtotal (unit price
    times quantity), never against the per-unit preview price.
    """
    item = compute_quote_item(plan, sub_total, selection.down_pct)

    return OrderItemFinancingSnapshot(
        plan_ref=plan.id,
        mode_applied=selection.mode,
        group_key=group_key,
        plan_code=plan.code,
        months=plan.months,
        surcharge_pct=plan.surcharge_pct,
        down_pct=selection.down_pct,
        down_amount=item.down_amount,
        surcharge_amount=item.surcharge_amount,
        total_with_surcharge=item.total,
        installment_amount=item.monthly,
    )
