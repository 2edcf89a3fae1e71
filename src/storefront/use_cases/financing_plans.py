"""Admin operations on financing plans."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.eligibility import in_group
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.financing import DEFAULT_DOWN_PCT, DEFAULT_GROUP_KEY, FinancingPlan
from storefront.ports.financing_group_repository import FinancingGroupRepository
from storefront.ports.financing_plan_repository import FinancingPlanRepository, PlanFilter
from storefront.use_cases.quote_financing import known_group_keys

logger = logging.getLogger(__name__)


def _admin_order(plans: list[FinancingPlan]) -> list[FinancingPlan]:
    return sorted(
        plans,
        key=lambda p: (p.months, p.surcharge_pct, p.code if p.code is not None else -1),
    )


@dataclass(frozen=True, slots=True)
class ListPlansRequest:
    group_key: str | None = None
    active_only: bool = False


class ListPlans:
    """Every plan record matching the filter. Never reduced to best-per-term."""

    def __init__(self, plan_repository: FinancingPlanRepository) -> None:
        self._repository = plan_repository

    def execute(self, request: ListPlansRequest) -> list[FinancingPlan]:
        plans = self._repository.list_plans(
            PlanFilter(group_key=request.group_key, active_only=request.active_only)
        )
        return _admin_order(plans)


@dataclass(frozen=True, slots=True)
class PublicPlans:
    default_down_pct: Decimal
    plans: list[FinancingPlan]


class ListPublicPlans:
    """Active plans for storefront widgets, together with the default down payment."""

    def __init__(
        self,
        plan_repository: FinancingPlanRepository,
        default_down_pct: Decimal = DEFAULT_DOWN_PCT,
        group_repository: FinancingGroupRepository | None = None,
    ) -> None:
        self._repository = plan_repository
        self._default_down_pct = default_down_pct
        self._group_repository = group_repository

    def execute(self, group_key: str | None = None) -> PublicPlans:
        group_keys = known_group_keys(self._group_repository, group_key)
        if group_keys is None:
            plans = self._repository.list_plans(PlanFilter(group_key=group_key, active_only=True))
        else:
            plans = [
                plan
                for plan in self._repository.list_plans(PlanFilter(active_only=True))
                if in_group(plan, DEFAULT_GROUP_KEY, group_keys)
            ]
        return PublicPlans(default_down_pct=self._default_down_pct, plans=_admin_order(plans))


class CreatePlan:
    def __init__(self, plan_repository: FinancingPlanRepository) -> None:
        self._repository = plan_repository

    def execute(self, plan: FinancingPlan) -> FinancingPlan:
        """
        Raises:
            ValidationError: If plan invariants do not hold
            ConflictError: If the legacy code is already in use
        """
        plan.validate()
        created = self._repository.create(plan)
        logger.info("Financing plan created", extra={"plan_id": created.id, "code": created.code})
        return created


class UpdatePlan:
    """
    Replace a plan's terms.

    Orders already placed keep their frozen snapshot; only future quotes
    and orders see the new terms.
    """

    def __init__(self, plan_repository: FinancingPlanRepository) -> None:
        self._repository = plan_repository

    def execute(self, plan: FinancingPlan) -> FinancingPlan:
        """
        Raises:
            ValidationError: If plan invariants do not hold
            NotFoundError: If the plan does not exist
        """
        plan.validate()
        updated = self._repository.update(plan)
        if updated is None:
            raise NotFoundError(resource="FinancingPlan", identifier=plan.id)
        logger.info("Financing plan updated", extra={"plan_id": updated.id})
        return updated


class DeletePlan:
    def __init__(self, plan_repository: FinancingPlanRepository) -> None:
        self._repository = plan_repository

    def execute(self, plan_id: str) -> None:
        """
        Hard delete. Orders referencing the plan keep their snapshot.

        Raises:
            NotFoundError: If the plan does not exist
        """
        if not self._repository.delete(plan_id):
            raise NotFoundError(resource="FinancingPlan", identifier=plan_id)
        logger.info("Financing plan deleted", extra={"plan_id": plan_id})


# ==============================================================================
# Bulk upsert
# ==============================================================================


@dataclass(frozen=True, slots=True)
class RejectedRow:
    index: int
    errors: list[dict[str, str]]


@dataclass(frozen=True, slots=True)
class UpsertPlansRequest:
    """
    Parsed bulk payload.

    rows pairs each plan with its position in the submitted array;
    rejected holds rows that could not even be parsed.
    """

    rows: list[tuple[int, FinancingPlan]]
    rejected: list[RejectedRow] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UpsertPlansResponse:
    count: int
    rejected: list[RejectedRow]


class UpsertPlans:
    """
    Bulk import of plans, matched by code, else by (description, months).

    Unordered semantics: a malformed or conflicting row is reported and
    skipped, the rest of the batch still applies.
    """

    def __init__(self, plan_repository: FinancingPlanRepository) -> None:
        self._repository = plan_repository

    def execute(self, request: UpsertPlansRequest) -> UpsertPlansResponse:
        rejected = list(request.rejected)
        valid: list[tuple[int, FinancingPlan]] = []

        for index, plan in request.rows:
            try:
                plan.validate()
            except ValidationError as exc:
                rejected.append(RejectedRow(index=index, errors=exc.errors or []))
                continue
            valid.append((index, plan))

        outcome = self._repository.upsert_many([plan for _, plan in valid])
        for position, reason in outcome.failed:
            rejected.append(
                RejectedRow(
                    index=valid[position][0],
                    errors=[{"field": "code", "message": reason, "code": "CONFLICT"}],
                )
            )
        for position, reason in outcome.invalid:
            rejected.append(
                RejectedRow(
                    index=valid[position][0],
                    errors=[{"field": "plan", "message": reason, "code": "INVALID_VALUE"}],
                )
            )

        logger.info(
            "Financing plans upserted",
            extra={"count": outcome.count, "rejected": len(rejected)},
        )
        return UpsertPlansResponse(
            count=outcome.count,
            rejected=sorted(rejected, key=lambda r: r.index),
        )
