from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.financing import FinancingGroup


class FinancingGroupRepository(ABC):
    """
    Port for financing group storage.

    list_groups() returns groups ordered by active first, then sort_order, then name.
    Deleting a group never touches plans referencing its key.
    """

    @abstractmethod
    def list_groups(self) -> list[FinancingGroup]: ...

    @abstractmethod
    def get_by_id(self, group_id: str) -> FinancingGroup | None: ...

    @abstractmethod
    def create(self, group: FinancingGroup) -> FinancingGroup:
        """
        Raises:
            ConflictError: If the key is already taken
        """
        ...

    @abstractmethod
    def update(self, group: FinancingGroup) -> FinancingGroup | None: ...

    @abstractmethod
    def delete(self, group_id: str) -> bool: ...
