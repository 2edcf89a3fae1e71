"""PostgreSQL implementation of FinancingPlanRepository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from storefront.adapters.sqlalchemy_errors import parse_uuid, translate_db_errors
from storefront.domain.financing import FinancingPlan
from storefront.infra.db.models.financing import FinancingPlanRow
from storefront.ports.financing_plan_repository import (
    FinancingPlanRepository,
    PlanFilter,
    UpsertOutcome,
)

if TYPE_CHECKING:
    from sqlalchemy.sql import Select

logger = logging.getLogger(__name__)


class PostgresFinancingPlanRepository(FinancingPlanRepository):
    """
    PostgreSQL implementation of FinancingPlanRepository.

    - Applies plan filters as SQL WHERE clauses
    - Orders listings by months, then surcharge_pct
    - Upserts row by row inside savepoints (continue on conflict)
    - Converts FinancingPlanRow (infrastructure) to FinancingPlan (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def list_plans(self, plan_filter: PlanFilter) -> list[FinancingPlan]:
        query = self._build_query(plan_filter)
        if query is None:
            return []

        with translate_db_errors("financing_plans.list"):
            rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, plan_id: str) -> FinancingPlan | None:
        row = self._get_row(plan_id)
        return self._to_domain(row) if row else None

    def get_by_code(self, code: int) -> FinancingPlan | None:
        query = select(FinancingPlanRow).where(FinancingPlanRow.code == code)
        with translate_db_errors("financing_plans.get_by_code"):
            row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def create(self, plan: FinancingPlan) -> FinancingPlan:
        row = FinancingPlanRow()
        self._apply(row, plan)

        with translate_db_errors("financing_plans.create"):
            self._session.add(row)
            self._session.flush()
        return self._to_domain(row)

    def update(self, plan: FinancingPlan) -> FinancingPlan | None:
        row = self._get_row(plan.id or "")
        if row is None:
            return None

        self._apply(row, plan)
        with translate_db_errors("financing_plans.update"):
            self._session.flush()
        return self._to_domain(row)

    def delete(self, plan_id: str) -> bool:
        row = self._get_row(plan_id)
        if row is None:
            return False

        with translate_db_errors("financing_plans.delete"):
            self._session.delete(row)
            self._session.flush()
        return True

    def upsert_many(self, plans: list[FinancingPlan]) -> UpsertOutcome:
        count = 0
        failed: list[tuple[int, str]] = []
        invalid: list[tuple[int, str]] = []

        with translate_db_errors("financing_plans.upsert_many"):
            for index, plan in enumerate(plans):
                try:
                    # Savepoint per row: a failing row only rolls back itself
                    with self._session.begin_nested():
                        self._upsert_one(plan)
                except IntegrityError:
                    logger.info(
                        "Skipping conflicting plan in bulk upsert",
                        extra={"index": index, "code": plan.code},
                    )
                    failed.append((index, "Conflicts with an existing plan"))
                    continue
                except DataError:
                    logger.info(
                        "Skipping out-of-range plan in bulk upsert",
                        extra={"index": index, "code": plan.code},
                    )
                    invalid.append((index, "A value exceeds what the data store can hold"))
                    continue
                count += 1

        return UpsertOutcome(count=count, failed=tuple(failed), invalid=tuple(invalid))

    def _upsert_one(self, plan: FinancingPlan) -> None:
        if plan.code is not None:
            query = select(FinancingPlanRow).where(FinancingPlanRow.code == plan.code)
        else:
            query = select(FinancingPlanRow).where(
                FinancingPlanRow.description == plan.description,
                FinancingPlanRow.months == plan.months,
            )
        row = self._session.execute(query.limit(1)).scalars().first()

        if row is None:
            row = FinancingPlanRow()
            self._session.add(row)
        self._apply(row, plan)
        self._session.flush()

    def _get_row(self, plan_id: str) -> FinancingPlanRow | None:
        uuid_ = parse_uuid(plan_id)
        if uuid_ is None:
            return None
        with translate_db_errors("financing_plans.get_by_id"):
            return self._session.get(FinancingPlanRow, uuid_)

    def _build_query(self, plan_filter: PlanFilter) -> Select[tuple[FinancingPlanRow]] | None:
        """
        Build the listing query, or None when no row can match.

        Args:
            plan_filter: Repository predicates

        Returns:
            SQLAlchemy select statement with WHERE and ORDER BY clauses
        """
        query = select(FinancingPlanRow)

        if plan_filter.active_only:
            query = query.where(FinancingPlanRow.active.is_(True))

        if plan_filter.plan_ids:
            ids = [u for u in (parse_uuid(p) for p in plan_filter.plan_ids) if u is not None]
            if not ids:
                return None
            query = query.where(FinancingPlanRow.id.in_(ids))
        elif plan_filter.group_key:
            # Ungrouped plans appear in every group
            query = query.where(
                or_(
                    FinancingPlanRow.group_key == plan_filter.group_key,
                    FinancingPlanRow.group_key.is_(None),
                    FinancingPlanRow.group_key == "",
                )
            )

        return query.order_by(FinancingPlanRow.months, FinancingPlanRow.surcharge_pct)

    @staticmethod
    def _apply(row: FinancingPlanRow, plan: FinancingPlan) -> None:
        row.code = plan.code
        row.description = plan.description
        row.months = plan.months
        row.surcharge_pct = plan.surcharge_pct
        row.group_key = plan.group_key
        row.active = plan.active
        row.min_price = plan.min_price
        row.max_price = plan.max_price
        row.include_categories = list(plan.include_categories)
        row.exclude_categories = list(plan.exclude_categories)

    @staticmethod
    def _to_domain(row: FinancingPlanRow) -> FinancingPlan:
        return FinancingPlan(
            id=str(row.id),
            code=row.code,
            description=row.description,
            months=row.months,
            surcharge_pct=row.surcharge_pct,  # Already Decimal from NUMERIC column
            group_key=row.group_key,
            active=row.active,
            min_price=row.min_price,
            max_price=row.max_price,
            include_categories=tuple(row.include_categories or ()),
            exclude_categories=tuple(row.exclude_categories or ()),
        )
