from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.order import Order, OrderFilters, OrderSort, Paging


@dataclass(frozen=True)
class OrderSearchResult:
    orders: list[Order]
    total_count: int


class OrderRepository(ABC):
    """
    Port for order persistence.

    Contract (Preconditions):
        - filters, sort and paging are validated by the caller (UseCase)
        - create() receives a fully built order; it is the single write
          of an order creation and either stores everything or nothing
    """

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Persist a new order and return it with id and timestamps."""
        ...

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None: ...

    @abstractmethod
    def update(self, order: Order) -> Order | None:
        """
        Save status, notes, customer and newly appended history entries.

        Line items and their financing snapshots are never rewritten.
        """
        ...

    @abstractmethod
    def delete(self, order_id: str) -> bool: ...

    @abstractmethod
    def search(self, filters: OrderFilters, sort: OrderSort, paging: Paging) -> OrderSearchResult:
        """Filter (AND semantics), sort, then page. total_count is counted before paging."""
        ...
