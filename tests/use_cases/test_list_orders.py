"""Test suite for ListOrders use case."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest

from storefront.adapters.in_memory_order_repository import InMemoryOrderRepository
from storefront.domain.errors import ValidationError
from storefront.domain.order import (
    Customer,
    Order,
    OrderFilters,
    OrderSort,
    OrderStatus,
    OrderTotals,
    Paging,
)
from storefront.ports.order_repository import OrderRepository, OrderSearchResult
from storefront.use_cases.list_orders import ListOrders, ListOrdersRequest, ListOrdersResponse


ZERO_TOTALS = OrderTotals(
    items_sub_total=Decimal("0"),
    surcharge_total=Decimal("0"),
    discount_total=Decimal("0"),
    shipping_total=Decimal("0"),
    grand_total=Decimal("0"),
)


def make_order(phone: str, status: OrderStatus = OrderStatus.EN_PROCESO) -> Order:
    return Order(
        customer=Customer(name="Cliente", phone=phone),
        items=(),
        totals=ZERO_TOTALS,
        status=status,
    )


@pytest.fixture()
def repository() -> InMemoryOrderRepository:
    repository = InMemoryOrderRepository()
    repository.create(make_order("5493811111111"))
    repository.create(make_order("5493812222222", OrderStatus.VENDIDO))
    repository.create(make_order("5491133333333", OrderStatus.VENDIDO))
    return repository


@pytest.fixture()
def mock_repository() -> Mock:
    repository = Mock(spec=OrderRepository)
    repository.search.return_value = OrderSearchResult(orders=[], total_count=0)
    return repository


# ==============================================================================
# Filtering
# ==============================================================================


def test_execute_without_filters_returns_everything(repository: InMemoryOrderRepository) -> None:
    response = ListOrders(order_repository=repository).execute(ListOrdersRequest())

    assert isinstance(response, ListOrdersResponse)
    assert response.total == 3
    assert len(response.orders) == 3


def test_execute_phone_prefix_ignores_formatting(repository: InMemoryOrderRepository) -> None:
    """'+54 9 381' and '549381' select the same orders."""
    use_case = ListOrders(order_repository=repository)

    formatted = use_case.execute(
        ListOrdersRequest(filters=OrderFilters(phone_prefix="+54 9 381"))
    )
    digits = use_case.execute(ListOrdersRequest(filters=OrderFilters(phone_prefix="549381")))

    assert formatted.total == 2
    assert [o.id for o in formatted.orders] == [o.id for o in digits.orders]


def test_execute_combines_filters_with_and(repository: InMemoryOrderRepository) -> None:
    response = ListOrders(order_repository=repository).execute(
        ListOrdersRequest(
            filters=OrderFilters(phone_prefix="549381", status=OrderStatus.VENDIDO)
        )
    )

    assert response.total == 1
    assert response.orders[0].customer.phone == "5493812222222"


def test_execute_filters_by_day(repository: InMemoryOrderRepository) -> None:
    today = datetime.now(timezone.utc).date()
    use_case = ListOrders(order_repository=repository)

    assert use_case.execute(ListOrdersRequest(filters=OrderFilters(day=today))).total == 3
    assert (
        use_case.execute(ListOrdersRequest(filters=OrderFilters(day=date(2000, 1, 1)))).total
        == 0
    )


def test_execute_phone_with_no_digits_is_ignored(mock_repository: Mock) -> None:
    ListOrders(order_repository=mock_repository).execute(
        ListOrdersRequest(filters=OrderFilters(phone_prefix="+ -"))
    )

    filters = mock_repository.search.call_args.kwargs["filters"]
    assert filters.phone_prefix is None


# ==============================================================================
# Paging
# ==============================================================================


def test_execute_pages_after_counting(repository: InMemoryOrderRepository) -> None:
    response = ListOrders(order_repository=repository).execute(
        ListOrdersRequest(paging=Paging(page=2, page_size=2))
    )

    assert response.total == 3
    assert len(response.orders) == 1
    assert response.total_pages == 2
    assert response.has_more is False


def test_response_page_metadata() -> None:
    response = ListOrdersResponse(orders=[], total=45, page=2, page_size=20)

    assert response.total_pages == 3
    assert response.has_more is True


def test_response_with_no_results_has_zero_pages() -> None:
    response = ListOrdersResponse(orders=[], total=0, page=1, page_size=20)

    assert response.total_pages == 0
    assert response.has_more is False


def test_execute_sorts_by_status_ascending(repository: InMemoryOrderRepository) -> None:
    response = ListOrders(order_repository=repository).execute(
        ListOrdersRequest(sort=OrderSort(field="status", descending=False))
    )

    assert [order.status for order in response.orders] == [
        OrderStatus.EN_PROCESO,
        OrderStatus.VENDIDO,
        OrderStatus.VENDIDO,
    ]


# ==============================================================================
# Validation
# ==============================================================================


@pytest.mark.parametrize(
    "request_",
    [
        ListOrdersRequest(paging=Paging(page=0)),
        ListOrdersRequest(paging=Paging(page_size=101)),
        ListOrdersRequest(sort=OrderSort(field="grand_total")),
        ListOrdersRequest(
            filters=OrderFilters(
                date_from=datetime(2025, 2, 1, tzinfo=timezone.utc),
                date_to=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )
        ),
    ],
)
def test_execute_rejects_invalid_request(
    mock_repository: Mock, request_: ListOrdersRequest
) -> None:
    with pytest.raises(ValidationError):
        ListOrders(order_repository=mock_repository).execute(request_)

    mock_repository.search.assert_not_called()


def test_execute_passes_normalized_filters_to_repository(mock_repository: Mock) -> None:
    request = ListOrdersRequest(
        filters=OrderFilters(phone_prefix="+54 381", status=OrderStatus.CANCELADO),
        sort=OrderSort(field="updated_at", descending=False),
        paging=Paging(page=3, page_size=10),
    )

    ListOrders(order_repository=mock_repository).execute(request)

    mock_repository.search.assert_called_once_with(
        filters=replace(request.filters, phone_prefix="54381"),
        sort=request.sort,
        paging=request.paging,
    )
