from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.financing import FinancingPlan


@dataclass(frozen=True, slots=True)
class PlanFilter:
    """
    Repository-side predicates for listing plans.

    plan_ids takes precedence over group_key; a group query also matches
    ungrouped plans.
    """

    plan_ids: tuple[str, ...] = ()
    group_key: str | None = None
    active_only: bool = False


@dataclass(frozen=True, slots=True)
class UpsertOutcome:
    count: int
    failed: tuple[tuple[int, str], ...] = ()  # (position in input, reason)
    invalid: tuple[tuple[int, str], ...] = ()  # rows the store cannot hold


class FinancingPlanRepository(ABC):
    """
    Port for financing plan storage.

    Pure storage: no quoting logic. Callers re-apply eligibility rules on
    the returned records, so implementations may over-select but must not
    under-select.
    """

    @abstractmethod
    def list_plans(self, plan_filter: PlanFilter) -> list[FinancingPlan]: ...

    @abstractmethod
    def get_by_id(self, plan_id: str) -> FinancingPlan | None: ...

    @abstractmethod
    def get_by_code(self, code: int) -> FinancingPlan | None: ...

    @abstractmethod
    def create(self, plan: FinancingPlan) -> FinancingPlan:
        """
        Persist a new plan and return it with its assigned id.

        Raises:
            ConflictError: If the legacy code is already taken
        """
        ...

    @abstractmethod
    def update(self, plan: FinancingPlan) -> FinancingPlan | None:
        """Replace the plan with the same id. Returns None if it does not exist."""
        ...

    @abstractmethod
    def delete(self, plan_id: str) -> bool:
        """Hard delete. Returns False if nothing was deleted."""
        ...

    @abstractmethod
    def upsert_many(self, plans: list[FinancingPlan]) -> UpsertOutcome:
        """
        Insert or update plans matched by code, else by (description, months).

        Each plan is applied independently: a conflicting row is reported
        in the outcome and does not block the rest.
        """
        ...
