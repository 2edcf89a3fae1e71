from __future__ import annotations

import uuid
from dataclasses import replace

from storefront.domain.errors import ConflictError
from storefront.domain.financing import FinancingGroup
from storefront.ports.financing_group_repository import FinancingGroupRepository


class InMemoryFinancingGroupRepository(FinancingGroupRepository):
    """Canonical contract implementation for tests. Keys are unique."""

    def __init__(self, groups: list[FinancingGroup] | None = None) -> None:
        self._groups: dict[str, FinancingGroup] = {}
        for group in groups or []:
            stored = group if group.id else replace(group, id=str(uuid.uuid4()))
            self._groups[stored.id] = stored  # type: ignore[index]

    def list_groups(self) -> list[FinancingGroup]:
        return sorted(
            self._groups.values(),
            key=lambda g: (not g.active, g.sort_order, g.name),
        )

    def get_by_id(self, group_id: str) -> FinancingGroup | None:
        return self._groups.get(group_id)

    def create(self, group: FinancingGroup) -> FinancingGroup:
        self._ensure_key_free(group)
        stored = replace(group, id=str(uuid.uuid4()))
        self._groups[stored.id] = stored  # type: ignore[index]
        return stored

    def update(self, group: FinancingGroup) -> FinancingGroup | None:
        if group.id not in self._groups:
            return None
        self._ensure_key_free(group)
        self._groups[group.id] = group
        return group

    def delete(self, group_id: str) -> bool:
        return self._groups.pop(group_id, None) is not None

    def _ensure_key_free(self, group: FinancingGroup) -> None:
        for existing in self._groups.values():
            if existing.key == group.key and existing.id != group.id:
                raise ConflictError(
                    f"Financing group key '{group.key}' is already in use", field="key"
                )
