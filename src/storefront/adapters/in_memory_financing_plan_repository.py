from __future__ import annotations

import uuid
from dataclasses import replace

from storefront.domain.errors import ConflictError
from storefront.domain.financing import FinancingPlan
from storefront.ports.financing_plan_repository import (
    FinancingPlanRepository,
    PlanFilter,
    UpsertOutcome,
)


class InMemoryFinancingPlanRepository(FinancingPlanRepository):
    """
    Canonical contract implementation for tests.

    - Stores plans in insertion order
    - plan_ids filter wins over group_key; group queries include ungrouped plans
    - Legacy codes are unique when set
    """

    def __init__(self, plans: list[FinancingPlan] | None = None) -> None:
        self._plans: dict[str, FinancingPlan] = {}
        for plan in plans or []:
            stored = plan if plan.id else replace(plan, id=str(uuid.uuid4()))
            self._plans[stored.id] = stored  # type: ignore[index]

    def list_plans(self, plan_filter: PlanFilter) -> list[FinancingPlan]:
        return [plan for plan in self._plans.values() if self._matches(plan, plan_filter)]

    def get_by_id(self, plan_id: str) -> FinancingPlan | None:
        return self._plans.get(plan_id)

    def get_by_code(self, code: int) -> FinancingPlan | None:
        return next((plan for plan in self._plans.values() if plan.code == code), None)

    def create(self, plan: FinancingPlan) -> FinancingPlan:
        self._ensure_code_free(plan)
        stored = replace(plan, id=str(uuid.uuid4()))
        self._plans[stored.id] = stored  # type: ignore[index]
        return stored

    def update(self, plan: FinancingPlan) -> FinancingPlan | None:
        if plan.id not in self._plans:
            return None
        self._ensure_code_free(plan)
        self._plans[plan.id] = plan
        return plan

    def delete(self, plan_id: str) -> bool:
        return self._plans.pop(plan_id, None) is not None

    def upsert_many(self, plans: list[FinancingPlan]) -> UpsertOutcome:
        count = 0
        failed: list[tuple[int, str]] = []

        for index, plan in enumerate(plans):
            existing = self._find_upsert_target(plan)
            try:
                if existing is None:
                    self.create(plan)
                else:
                    self.update(replace(plan, id=existing.id))
            except ConflictError as exc:
                failed.append((index, exc.message))
                continue
            count += 1

        return UpsertOutcome(count=count, failed=tuple(failed))

    def _find_upsert_target(self, plan: FinancingPlan) -> FinancingPlan | None:
        if plan.code is not None:
            return self.get_by_code(plan.code)
        return next(
            (
                p
                for p in self._plans.values()
                if p.description == plan.description and p.months == plan.months
            ),
            None,
        )

    def _ensure_code_free(self, plan: FinancingPlan) -> None:
        if plan.code is None:
            return
        owner = self.get_by_code(plan.code)
        if owner is not None and owner.id != plan.id:
            raise ConflictError(f"Plan code {plan.code} is already in use", field="code")

    def _matches(self, plan: FinancingPlan, plan_filter: PlanFilter) -> bool:
        if plan_filter.active_only and not plan.active:
            return False
        if plan_filter.plan_ids:
            return plan.id in plan_filter.plan_ids
        if plan_filter.group_key:
            return plan.is_ungrouped or plan.group_key == plan_filter.group_key
        return True
