"""Get order by ID use case."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.errors import NotFoundError
from storefront.domain.order import Order
from storefront.ports.order_repository import OrderRepository


@dataclass(frozen=True, slots=True)
class GetOrderByIdRequest:
    order_id: str


class GetOrderById:
    """
    Use case for retrieving a single order with its frozen line snapshots.

    Unknown and malformed ids are both reported as not found.
    """

    def __init__(self, order_repository: OrderRepository) -> None:
        self._repository = order_repository

    def execute(self, request: GetOrderByIdRequest) -> Order:
        """
        Raises:
            NotFoundError: If the order doesn't exist
        """
        order = self._repository.get_by_id(request.order_id)
        if order is None:
            raise NotFoundError(resource="Order", identifier=request.order_id)
        return order
