from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.order import (
    Order,
    OrderStatus,
    StatusChange,
    can_transition,
    normalize_phone,
)
from storefront.ports.order_repository import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CustomerPatch:
    """Partial customer edit. None leaves the field as it is."""

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    doc_number: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateOrderRequest:
    order_id: str
    status: OrderStatus | None = None
    reason: str | None = None
    notes: str | None = None
    customer: CustomerPatch | None = None


class UpdateOrder:
    """
    Admin edit of an order header.

    A status change appends one entry to the history; setting the current
    status again is a no-op. Items and their financing snapshots are
    never touched.
    """

    def __init__(self, order_repository: OrderRepository) -> None:
        self._repository = order_repository

    def execute(self, request: UpdateOrderRequest) -> Order:
        """
        Raises:
            NotFoundError: If the order doesn't exist
            ValidationError: If the transition is not allowed or the customer is invalid
        """
        order = self._repository.get_by_id(request.order_id)
        if order is None:
            raise NotFoundError(resource="Order", identifier=request.order_id)

        updated = order

        if request.status is not None and request.status is not order.status:
            if not can_transition(order.status, request.status):
                raise ValidationError(
                    errors=[
                        {
                            "field": "status",
                            "message": (
                                f"Cannot move from '{order.status.value}' "
                                f"to '{request.status.value}'"
                            ),
                            "code": "INVALID_TRANSITION",
                        }
                    ]
                )
            change = StatusChange(
                at=datetime.now(timezone.utc),
                from_status=order.status,
                to_status=request.status,
                reason=request.reason,
            )
            updated = replace(
                updated,
                status=request.status,
                status_history=(*order.status_history, change),
            )

        if request.notes is not None:
            updated = replace(updated, notes=request.notes)

        if request.customer is not None:
            patch = request.customer
            customer = replace(
                order.customer,
                name=patch.name if patch.name is not None else order.customer.name,
                phone=(
                    normalize_phone(patch.phone)
                    if patch.phone is not None
                    else order.customer.phone
                ),
                email=patch.email if patch.email is not None else order.customer.email,
                doc_number=(
                    patch.doc_number if patch.doc_number is not None else order.customer.doc_number
                ),
            )
            customer.validate()
            updated = replace(updated, customer=customer)

        if updated is order:
            return order

        saved = self._repository.update(updated)
        if saved is None:
            raise NotFoundError(resource="Order", identifier=request.order_id)

        if saved.status is not order.status:
            logger.info(
                "Order status changed",
                extra={
                    "order_id": saved.id,
                    "from_status": order.status.value,
                    "to_status": saved.status.value,
                },
            )
        return saved
