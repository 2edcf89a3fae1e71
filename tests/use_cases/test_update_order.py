"""Test suite for UpdateOrder use case."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest

from storefront.adapters.in_memory_order_repository import InMemoryOrderRepository
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.financing import FinancingMode
from storefront.domain.order import (
    Customer,
    Order,
    OrderItem,
    OrderItemFinancingSnapshot,
    OrderStatus,
    OrderTotals,
    StatusChange,
)
from storefront.ports.order_repository import OrderRepository
from storefront.use_cases.update_order import CustomerPatch, UpdateOrder, UpdateOrderRequest


@pytest.fixture()
def repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture()
def stored_order(repository: InMemoryOrderRepository) -> Order:
    snapshot = OrderItemFinancingSnapshot(
        plan_ref="p6",
        mode_applied=FinancingMode.INHERIT,
        months=6,
        surcharge_pct=Decimal("0.30"),
        down_pct=Decimal("0.15"),
        down_amount=Decimal("15000.00"),
        surcharge_amount=Decimal("25500.00"),
        total_with_surcharge=Decimal("110500.00"),
        installment_amount=Decimal("18416.67"),
    )
    return repository.create(
        Order(
            customer=Customer(name="Juan", phone="5493815551234"),
            items=(
                OrderItem(
                    product_id="prod-1",
                    product_title="Samsung Galaxy A5",
                    category="celulares",
                    unit_price=Decimal("100000"),
                    quantity=1,
                    sub_total=Decimal("100000"),
                    grand_total=Decimal("125500.00"),
                    financing=snapshot,
                ),
            ),
            totals=OrderTotals(
                items_sub_total=Decimal("100000"),
                surcharge_total=Decimal("25500.00"),
                discount_total=Decimal("0"),
                shipping_total=Decimal("0"),
                grand_total=Decimal("125500.00"),
            ),
            status_history=(
                StatusChange(
                    at=datetime(2025, 3, 1, tzinfo=timezone.utc),
                    to_status=OrderStatus.EN_PROCESO,
                ),
            ),
        )
    )


# ==============================================================================
# Status changes
# ==============================================================================


def test_status_change_appends_history(
    repository: InMemoryOrderRepository, stored_order: Order
) -> None:
    updated = UpdateOrder(order_repository=repository).execute(
        UpdateOrderRequest(
            order_id=stored_order.id,  # type: ignore[arg-type]
            status=OrderStatus.VENDIDO,
            reason="Pago confirmado",
        )
    )

    assert updated.status is OrderStatus.VENDIDO
    assert len(updated.status_history) == 2
    change = updated.status_history[-1]
    assert change.from_status is OrderStatus.EN_PROCESO
    assert change.to_status is OrderStatus.VENDIDO
    assert change.reason == "Pago confirmado"


def test_terminal_status_can_be_corrected(
    repository: InMemoryOrderRepository, stored_order: Order
) -> None:
    use_case = UpdateOrder(order_repository=repository)
    order_id = stored_order.id or ""

    use_case.execute(UpdateOrderRequest(order_id=order_id, status=OrderStatus.CANCELADO))
    reopened = use_case.execute(
        UpdateOrderRequest(order_id=order_id, status=OrderStatus.EN_PROCESO)
    )

    assert reopened.status is OrderStatus.EN_PROCESO
    assert [change.to_status for change in reopened.status_history] == [
        OrderStatus.EN_PROCESO,
        OrderStatus.CANCELADO,
        OrderStatus.EN_PROCESO,
    ]


def test_same_status_is_a_no_op(stored_order: Order) -> None:
    repository = Mock(spec=OrderRepository)
    repository.get_by_id.return_value = stored_order

    result = UpdateOrder(order_repository=repository).execute(
        UpdateOrderRequest(order_id="any", status=OrderStatus.EN_PROCESO)
    )

    assert result is stored_order
    repository.update.assert_not_called()


# ==============================================================================
# Header edits
# ==============================================================================


def test_notes_and_customer_patch(
    repository: InMemoryOrderRepository, stored_order: Order
) -> None:
    updated = UpdateOrder(order_repository=repository).execute(
        UpdateOrderRequest(
            order_id=stored_order.id,  # type: ignore[arg-type]
            notes="Entregar por la tarde",
            customer=CustomerPatch(phone="+54 9 381 999-0000", email="juan@example.com"),
        )
    )

    assert updated.notes == "Entregar por la tarde"
    assert updated.customer.name == "Juan"
    assert updated.customer.phone == "5493819990000"
    assert updated.customer.email == "juan@example.com"
    assert updated.status_history == stored_order.status_history


def test_items_and_snapshots_are_never_touched(
    repository: InMemoryOrderRepository, stored_order: Order
) -> None:
    updated = UpdateOrder(order_repository=repository).execute(
        UpdateOrderRequest(
            order_id=stored_order.id,  # type: ignore[arg-type]
            status=OrderStatus.VENDIDO,
            notes="ok",
        )
    )

    assert updated.items == stored_order.items
    assert updated.totals == stored_order.totals


def test_invalid_customer_patch_is_rejected(
    repository: InMemoryOrderRepository, stored_order: Order
) -> None:
    with pytest.raises(ValidationError):
        UpdateOrder(order_repository=repository).execute(
            UpdateOrderRequest(
                order_id=stored_order.id,  # type: ignore[arg-type]
                customer=CustomerPatch(email="broken"),
            )
        )


def test_unknown_order_raises_not_found(repository: InMemoryOrderRepository) -> None:
    with pytest.raises(NotFoundError):
        UpdateOrder(order_repository=repository).execute(
            UpdateOrderRequest(order_id="missing", status=OrderStatus.VENDIDO)
        )
