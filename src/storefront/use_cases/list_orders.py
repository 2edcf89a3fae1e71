from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

from storefront.domain.order import Order, OrderFilters, OrderSort, Paging, normalize_phone
from storefront.ports.order_repository import OrderRepository


@dataclass(frozen=True, slots=True)
class ListOrdersRequest:
    filters: OrderFilters = field(default_factory=OrderFilters)
    sort: OrderSort = field(default_factory=OrderSort)
    paging: Paging = field(default_factory=Paging)


@dataclass(frozen=True, slots=True)
class ListOrdersResponse:
    orders: list[Order]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


class ListOrders:
    """
    Admin order listing with filters, sorting and pagination.

    Validates the request and delegates filtering to the repository.
    The phone filter is a prefix match on the digits-only phone, so
    "+54 9 381" and "549381" find the same orders.
    """

    def __init__(self, order_repository: OrderRepository) -> None:
        self._repository = order_repository

    def execute(self, request: ListOrdersRequest) -> ListOrdersResponse:
        """
        Raises:
            ValidationError: If filters, sort or paging are invalid
        """
        request.filters.validate()
        request.sort.validate()
        request.paging.validate()

        filters = request.filters
        if filters.phone_prefix is not None:
            filters = replace(filters, phone_prefix=normalize_phone(filters.phone_prefix) or None)

        result = self._repository.search(filters=filters, sort=request.sort, paging=request.paging)

        return ListOrdersResponse(
            orders=result.orders,
            total=result.total_count,
            page=request.paging.page,
            page_size=request.paging.page_size,
        )
