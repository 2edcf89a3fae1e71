"""Admin operations on financing groups."""

from __future__ import annotations

from storefront.domain.errors import NotFoundError
from storefront.domain.financing import FinancingGroup
from storefront.ports.financing_group_repository import FinancingGroupRepository


class ListGroups:
    def __init__(self, group_repository: FinancingGroupRepository) -> None:
        self._repository = group_repository

    def execute(self) -> list[FinancingGroup]:
        return self._repository.list_groups()


class CreateGroup:
    def __init__(self, group_repository: FinancingGroupRepository) -> None:
        self._repository = group_repository

    def execute(self, group: FinancingGroup) -> FinancingGroup:
        """
        Raises:
            ValidationError: If key or name are invalid
            ConflictError: If the key is already in use
        """
        group.validate()
        return self._repository.create(group)


class UpdateGroup:
    def __init__(self, group_repository: FinancingGroupRepository) -> None:
        self._repository = group_repository

    def execute(self, group: FinancingGroup) -> FinancingGroup:
        """
        Raises:
            ValidationError: If key or name are invalid
            NotFoundError: If the group does not exist
            ConflictError: If the new key is already in use
        """
        group.validate()
        updated = self._repository.update(group)
        if updated is None:
            raise NotFoundError(resource="FinancingGroup", identifier=group.id)
        return updated


class DeleteGroup:
    """Delete a group. Plans keep their (now orphaned) key and act as default-group plans."""

    def __init__(self, group_repository: FinancingGroupRepository) -> None:
        self._repository = group_repository

    def execute(self, group_id: str) -> None:
        if not self._repository.delete(group_id):
            raise NotFoundError(resource="FinancingGroup", identifier=group_id)
