"""
Financing plan eligibility.

Decides which plans may be quoted for a price/product/group combination.
Repositories pre-filter with the same predicates; these rules are always
re-applied on the returned records so no call site can bypass them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from storefront.domain.financing import (
    DEFAULT_DOWN_PCT,
    DEFAULT_GROUP_KEY,
    FinancingMode,
    FinancingPlan,
    ProductFinancingConfig,
)


@dataclass(frozen=True, slots=True)
class PlanSelection:
    """How a product's financing config resolved for one quote or sale."""

    offered: bool
    mode: FinancingMode
    down_pct: Decimal
    plan_ids: tuple[str, ...] = ()
    group_key: str | None = None


def in_group(
    plan: FinancingPlan, group_key: str, known_group_keys: frozenset[str] | None = None
) -> bool:
    """
    Ungrouped plans belong to every group.

    When known_group_keys is given, a plan whose group no longer exists
    falls back to the default group.
    """
    if plan.is_ungrouped or plan.group_key == group_key:
        return True
    return (
        group_key == DEFAULT_GROUP_KEY
        and known_group_keys is not None
        and plan.group_key not in known_group_keys
    )


def within_price_bounds(plan: FinancingPlan, price: Decimal) -> bool:
    if plan.min_price is not None and price < plan.min_price:
        return False
    if plan.max_price is not None and price > plan.max_price:
        return False
    return True


def allows_category(plan: FinancingPlan, category: str) -> bool:
    wanted = category.strip().lower()
    excluded = {c.strip().lower() for c in plan.exclude_categories}
    if wanted in excluded:
        return False
    included = {c.strip().lower() for c in plan.include_categories if c.strip()}
    if included and wanted not in included:
        return False
    return True


def is_eligible(
    plan: FinancingPlan,
    price: Decimal | None = None,
    plan_ids: tuple[str, ...] = (),
    group_key: str | None = None,
    category: str | None = None,
    known_group_keys: frozenset[str] | None = None,
) -> bool:
    if not plan.active:
        return False

    if plan_ids:
        if plan.id not in plan_ids:
            return False
    elif group_key and not in_group(plan, group_key, known_group_keys):
        return False

    if price is not None and price.is_finite() and not within_price_bounds(plan, price):
        return False
    if category and not allows_category(plan, category):
        return False

    return True


def select_eligible_plans(
    plans: Iterable[FinancingPlan],
    price: Decimal | None = None,
    plan_ids: tuple[str, ...] = (),
    group_key: str | None = None,
    category: str | None = None,
    known_group_keys: frozenset[str] | None = None,
) -> list[FinancingPlan]:
    """
    Filter candidate plans.

    Priority:
    1. plan_ids non-empty: only those plans (any group), still active
    2. group_key: active plans in that group, plus ungrouped plans (and,
       for the default group, plans whose group is not in known_group_keys)
    3. otherwise: every active plan

    Price bounds apply when a price is given, category include/exclude
    lists when a category is given. Output keeps input order.
    """
    return [
        plan
        for plan in plans
        if is_eligible(
            plan,
            price=price,
            plan_ids=plan_ids,
            group_key=group_key,
            category=category,
            known_group_keys=known_group_keys,
        )
    ]


def resolve_product_selection(
    config: ProductFinancingConfig | None,
    default_down_pct: Decimal = DEFAULT_DOWN_PCT,
) -> PlanSelection:
    """
    Resolve a product's financing config into a plan selection.

    - disabled: never offered
    - override with plan ids: exactly those plans
    - override with a group key and no plan ids: that group
    - override with neither: not offered ("no plans chosen yet")
    - inherit: every active plan
    """
    if config is None:
        return PlanSelection(offered=True, mode=FinancingMode.INHERIT, down_pct=default_down_pct)

    down_pct = config.down_pct if config.down_pct is not None else default_down_pct

    if config.mode is FinancingMode.DISABLED:
        return PlanSelection(offered=False, mode=config.mode, down_pct=down_pct)

    if config.mode is FinancingMode.OVERRIDE:
        if config.plan_ids:
            return PlanSelection(
                offered=True,
                mode=config.mode,
                down_pct=down_pct,
                plan_ids=tuple(config.plan_ids),
            )
        if config.group_key:
            return PlanSelection(
                offered=True,
                mode=config.mode,
                down_pct=down_pct,
                group_key=config.group_key,
            )
        return PlanSelection(offered=False, mode=config.mode, down_pct=down_pct)

    return PlanSelection(offered=True, mode=FinancingMode.INHERIT, down_pct=down_pct)
