from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from storefront.domain.order import Order, OrderFilters, OrderSort, Paging
from storefront.ports.order_repository import OrderRepository, OrderSearchResult


class InMemoryOrderRepository(OrderRepository):
    """
    Canonical contract implementation for tests.

    - create() is the only way an order enters the store
    - update() keeps the original line items (snapshots are immutable)
    - search() filters with AND semantics, sorts, then pages
    """

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}

    @property
    def orders(self) -> list[Order]:
        return list(self._orders.values())

    def create(self, order: Order) -> Order:
        now = datetime.now(timezone.utc)
        stored = replace(order, id=str(uuid.uuid4()), created_at=now, updated_at=now)
        self._orders[stored.id] = stored  # type: ignore[index]
        return stored

    def get_by_id(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def update(self, order: Order) -> Order | None:
        current = self._orders.get(order.id or "")
        if current is None:
            return None
        stored = replace(
            order,
            items=current.items,
            totals=current.totals,
            created_at=current.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        self._orders[stored.id] = stored  # type: ignore[index]
        return stored

    def delete(self, order_id: str) -> bool:
        return self._orders.pop(order_id, None) is not None

    def search(self, filters: OrderFilters, sort: OrderSort, paging: Paging) -> OrderSearchResult:
        matches = [order for order in self._orders.values() if self._matches(order, filters)]
        matches.sort(
            key=lambda o: _sort_value(o, sort.field),
            reverse=sort.descending,
        )
        total_count = len(matches)  # Count BEFORE paging

        start = paging.offset
        end = start + paging.page_size
        return OrderSearchResult(orders=matches[start:end], total_count=total_count)

    def _matches(self, order: Order, filters: OrderFilters) -> bool:
        if filters.phone_prefix and not order.customer.phone.startswith(filters.phone_prefix):
            return False
        if filters.status is not None and order.status is not filters.status:
            return False
        created_at = order.created_at
        if created_at is None:
            return True
        if filters.day is not None:
            return created_at.date() == filters.day
        if filters.date_from is not None and created_at < filters.date_from:
            return False
        if filters.date_to is not None and created_at > filters.date_to:
            return False
        return True


def _sort_value(order: Order, field: str) -> str:
    value = getattr(order, field)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(getattr(value, "value", value))
