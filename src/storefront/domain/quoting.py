"""
Financing quote engine.

Pure functions shared by every quote consumer (quote endpoint, product
preview, order snapshot, client fallback table).

Rounding policy:
- Intermediate values keep full Decimal precision
- Every monetary output is quantized to cents using ROUND_HALF_UP
- monthly is derived from the unrounded total, so monthly * months
  equals total within half a cent per installment
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow
from typing import Iterable, Sequence

from storefront.domain.errors import ArithmeticGuardError
from storefront.domain.financing import FinancingPlan, QuoteItem

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def check_finite(price: Decimal, down_pct: Decimal) -> None:
    """
    Guard against inputs no installment can be computed from.

    Raises:
        ArithmeticGuardError: If price or down_pct is NaN or infinite
    """
    if not price.is_finite():
        raise ArithmeticGuardError("price must be a finite number", field="price")
    if not down_pct.is_finite():
        raise ArithmeticGuardError("down_pct must be a finite number", field="down_pct")


def split_down_payment(price: Decimal, down_pct: Decimal) -> tuple[Decimal, Decimal]:
    """Return (down_amount, balance) at full precision. The balance never goes negative."""
    down_amount = price * down_pct
    balance = max(ZERO, price - down_amount)
    return down_amount, balance


def compute_quote_item(plan: FinancingPlan, price: Decimal, down_pct: Decimal) -> QuoteItem:
    """
    Compute one installment option.

        down_amount     = price * down_pct
        balance         = max(0, price - down_amount)
        surcharge       = balance * surcharge_pct
        total           = balance + surcharge
        monthly         = total / months

    Raises:
        ArithmeticGuardError: If months < 1, inputs are not finite, or an
            amount has more digits than the decimal context can quantize
    """
    check_finite(price, down_pct)
    if plan.months < 1:
        raise ArithmeticGuardError(
            "months must be >= 1", field="months", plan_id=plan.id, code=plan.code
        )

    try:
        down_amount, balance = split_down_payment(price, down_pct)
        surcharge_amount = balance * plan.surcharge_pct
        total = balance + surcharge_amount
        monthly = total / Decimal(plan.months)

        return QuoteItem(
            plan_id=plan.id,
            code=plan.code,
            description=plan.description,
            months=plan.months,
            surcharge_pct=plan.surcharge_pct,
            down_pct=down_pct,
            down_amount=to_cents(down_amount),
            balance=to_cents(balance),
            surcharge_amount=to_cents(surcharge_amount),
            total=to_cents(total),
            monthly=to_cents(monthly),
        )
    except (InvalidOperation, Overflow) as exc:
        raise ArithmeticGuardError(
            "amount is too large to quote", field="price", plan_id=plan.id, code=plan.code
        ) from exc


def quote_sort_key(item: QuoteItem) -> tuple[int, Decimal, int, str, str]:
    """Shortest term first, cheapest surcharge as tiebreak, then a stable identity."""
    return (
        item.months,
        item.surcharge_pct,
        item.code if item.code is not None else -1,
        item.description,
        item.plan_id or "",
    )


def sort_quote_items(items: Iterable[QuoteItem]) -> list[QuoteItem]:
    return sorted(items, key=quote_sort_key)


def build_quote(
    price: Decimal, down_pct: Decimal, plans: Sequence[FinancingPlan]
) -> list[QuoteItem]:
    """
    Quote every usable plan and return the items in display order.

    Inactive plans and plans with months < 1 are skipped (the latter logged).
    Zero usable plans is a valid outcome and yields an empty list.

    Raises:
        ArithmeticGuardError: If price or down_pct is not finite
    """
    check_finite(price, down_pct)

    items: list[QuoteItem] = []
    for plan in plans:
        if not plan.active:
            continue
        if plan.months < 1:
            logger.warning(
                "Skipping financing plan with invalid term",
                extra={"plan_id": plan.id, "code": plan.code, "months": plan.months},
            )
            continue
        items.append(compute_quote_item(plan, price, down_pct))

    return sort_quote_items(items)


def best_per_term(items: Iterable[QuoteItem]) -> list[QuoteItem]:
    """
    Keep one offer per installment count: the one with the lowest surcharge.

    Used by the "best offers" views (card preview, compact selector).
    Admin listings must not go through this reduction.
    """
    by_months: dict[int, QuoteItem] = {}
    for item in sort_quote_items(items):
        # Sorted input: the first item seen for a term is already the cheapest
        if item.months not in by_months:
            by_months[item.months] = item

    return sort_quote_items(by_months.values())
