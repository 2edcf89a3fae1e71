from __future__ import annotations

import logging

from storefront.domain.errors import NotFoundError
from storefront.ports.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeleteOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._repository = order_repository

    def execute(self, order_id: str) -> None:
        """
        Raises:
            NotFoundError: If the order doesn't exist
        """
        if not self._repository.delete(order_id):
            raise NotFoundError(resource="Order", identifier=order_id)
        logger.info("Order deleted", extra={"order_id": order_id})
