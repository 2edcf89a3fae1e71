"""PostgreSQL implementation of FinancingGroupRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.adapters.sqlalchemy_errors import parse_uuid, translate_db_errors
from storefront.domain.financing import FinancingGroup
from storefront.infra.db.models.financing import FinancingGroupRow
from storefront.ports.financing_group_repository import FinancingGroupRepository


class PostgresFinancingGroupRepository(FinancingGroupRepository):
    """
    PostgreSQL implementation of FinancingGroupRepository.

    Key uniqueness is enforced by the database; violations surface as
    ConflictError through translate_db_errors.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_groups(self) -> list[FinancingGroup]:
        query = select(FinancingGroupRow).order_by(
            FinancingGroupRow.active.desc(),
            FinancingGroupRow.sort_order,
            FinancingGroupRow.name,
        )
        with translate_db_errors("financing_groups.list"):
            rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, group_id: str) -> FinancingGroup | None:
        row = self._get_row(group_id)
        return self._to_domain(row) if row else None

    def create(self, group: FinancingGroup) -> FinancingGroup:
        row = FinancingGroupRow()
        self._apply(row, group)

        with translate_db_errors("financing_groups.create"):
            self._session.add(row)
            self._session.flush()
        return self._to_domain(row)

    def update(self, group: FinancingGroup) -> FinancingGroup | None:
        row = self._get_row(group.id or "")
        if row is None:
            return None

        self._apply(row, group)
        with translate_db_errors("financing_groups.update"):
            self._session.flush()
        return self._to_domain(row)

    def delete(self, group_id: str) -> bool:
        row = self._get_row(group_id)
        if row is None:
            return False

        # Plans keep their group_key; orphaned keys fall back to default semantics
        with translate_db_errors("financing_groups.delete"):
            self._session.delete(row)
            self._session.flush()
        return True

    def _get_row(self, group_id: str) -> FinancingGroupRow | None:
        uuid_ = parse_uuid(group_id)
        if uuid_ is None:
            return None
        with translate_db_errors("financing_groups.get_by_id"):
            return self._session.get(FinancingGroupRow, uuid_)

    @staticmethod
    def _apply(row: FinancingGroupRow, group: FinancingGroup) -> None:
        row.key = group.key
        row.name = group.name
        row.description = group.description
        row.sort_order = group.sort_order
        row.active = group.active

    @staticmethod
    def _to_domain(row: FinancingGroupRow) -> FinancingGroup:
        return FinancingGroup(
            id=str(row.id),
            key=row.key,
            name=row.name,
            description=row.description,
            sort_order=row.sort_order,
            active=row.active,
        )
