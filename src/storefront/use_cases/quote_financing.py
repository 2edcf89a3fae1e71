from __future__ import annotations

import logging

from storefront.domain.eligibility import select_eligible_plans
from storefront.domain.errors import ArithmeticGuardError
from storefront.domain.financing import DEFAULT_GROUP_KEY, Quote, QuoteRequest
from storefront.domain.quoting import best_per_term, build_quote, check_finite
from storefront.ports.financing_group_repository import FinancingGroupRepository
from storefront.ports.financing_plan_repository import FinancingPlanRepository, PlanFilter

logger = logging.getLogger(__name__)


def known_group_keys(
    group_repository: FinancingGroupRepository | None,
    group_key: str | None,
    plan_ids: tuple[str, ...] = (),
) -> frozenset[str] | None:
    """
    Keys of the groups that still exist, when the selection needs them.

    Only a default-group selection absorbs plans whose group was deleted,
    so every other selection returns None and skips the lookup.
    """
    if group_repository is None or plan_ids or group_key != DEFAULT_GROUP_KEY:
        return None
    return frozenset(group.key for group in group_repository.list_groups())


class QuoteFinancing:
    """
    Quote installment options for a price.

    Steps:
    1. Read candidate plans (repository pre-filters by ids / group / active)
    2. Re-apply every eligibility rule, including price and category bounds
    3. Compute, order by (months, surcharge_pct) and optionally keep the
       best offer per term

    Plans are read on every call; nothing is cached between requests.
    """

    def __init__(
        self,
        plan_repository: FinancingPlanRepository,
        group_repository: FinancingGroupRepository | None = None,
    ) -> None:
        self._plan_repository = plan_repository
        self._group_repository = group_repository

    def execute(self, request: QuoteRequest, best_only: bool = False) -> Quote:
        """
        Execute the quote.

        Args:
            request: Price, down payment and plan selection
            best_only: Keep only the cheapest plan per installment count

        Returns:
            Quote with ordered items; empty when nothing is eligible or the
            inputs cannot be computed

        Raises:
            ValidationError: If |price| is beyond storable amounts or down_pct
                is outside [0, 1]
        """
        request.validate()

        try:
            check_finite(request.price, request.down_pct)

            group_keys = known_group_keys(
                self._group_repository, request.group_key, request.plan_ids
            )
            candidates = self._plan_repository.list_plans(
                PlanFilter(
                    plan_ids=request.plan_ids,
                    # Default group with orphan fallback: read all, eligibility filters
                    group_key=request.group_key if group_keys is None else None,
                    active_only=True,
                )
            )
            eligible = select_eligible_plans(
                candidates,
                price=request.price,
                plan_ids=request.plan_ids,
                group_key=request.group_key,
                category=request.category,
                known_group_keys=group_keys,
            )
            items = build_quote(request.price, request.down_pct, eligible)
        except ArithmeticGuardError as exc:
            logger.info(
                "Quote inputs cannot be computed, returning no plans",
                extra={"reason": exc.message, **exc.context},
            )
            return Quote(price=request.price, down_pct=request.down_pct)

        if best_only:
            items = best_per_term(items)

        return Quote(price=request.price, down_pct=request.down_pct, items=tuple(items))
