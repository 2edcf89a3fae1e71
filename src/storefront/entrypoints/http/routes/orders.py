from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status

from storefront.domain.order import OrderStatus
from storefront.entrypoints.http.dependencies import (
    get_create_order_use_case,
    get_delete_order_use_case,
    get_get_order_by_id_use_case,
    get_list_orders_use_case,
    get_update_order_use_case,
    require_admin,
)
from storefront.entrypoints.http.dtos.orders import (
    CreateOrderRequestDTO,
    OrderDTO,
    OrderListResponseDTO,
    UpdateOrderRequestDTO,
)
from storefront.entrypoints.http.error_responses import ErrorResponse
from storefront.entrypoints.http.mappers.order_mapper import OrderMapper
from storefront.use_cases.create_order import CreateOrder
from storefront.use_cases.delete_order import DeleteOrder
from storefront.use_cases.get_order_by_id import GetOrderById, GetOrderByIdRequest
from storefront.use_cases.list_orders import ListOrders
from storefront.use_cases.update_order import UpdateOrder


router = APIRouter(tags=["Orders"])


@router.post(
    "/orders",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="""
    Create an order and freeze the financing terms of every financed line.

    ## Financing
    - Reference a plan by `planId` (preferred) or by legacy `code`
    - The plan is read fresh and must be allowed for the product
    - Installments are computed on the line subtotal (unit price × quantity)
      with the product's down payment; client figures are ignored

    ## Atomicity
    Lines are built in order. If any product or plan cannot be resolved the
    whole request fails and nothing is stored.

    ## Example
    ```
    POST /v1/orders
    {
        "customer": {"name": "Juan", "phone": "+54 9 381 555-1234"},
        "items": [{"productId": "...", "quantity": 2, "financing": {"code": 5}}]
    }
    ```
    """,
    responses={
        422: {
            "description": "Validation error or unresolvable reference",
            "content": {
                "application/json": {
                    "examples": {
                        "empty_items": {
                            "summary": "No items",
                            "value": {
                                "detail": "Validation failed",
                                "code": "VALIDATION_ERROR",
                                "errors": [
                                    {
                                        "field": "items",
                                        "message": "Must contain at least one item",
                                        "code": "REQUIRED",
                                    }
                                ],
                            },
                        },
                        "plan_not_found": {
                            "summary": "Unknown plan",
                            "value": {
                                "detail": "FinancingPlan with identifier '99' not found",
                                "code": "PLAN_NOT_FOUND",
                            },
                        },
                        "product_not_found": {
                            "summary": "Unknown product",
                            "value": {
                                "detail": "Product with identifier 'abc' not found",
                                "code": "PRODUCT_NOT_FOUND",
                            },
                        },
                    }
                }
            },
        },
        503: {"model": ErrorResponse, "description": "Database unavailable"},
    },
)
def create_order(
    payload: CreateOrderRequestDTO,
    use_case: CreateOrder = Depends(get_create_order_use_case),
) -> OrderDTO:
    """Create order endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain request
    request = OrderMapper.to_create_request(payload)

    # 2. Execute use case (single write)
    order = use_case.execute(request)

    # 3. Map to response
    return OrderMapper.to_dto(order)


@router.get(
    "/orders",
    response_model=OrderListResponseDTO,
    summary="List orders",
    dependencies=[Depends(require_admin)],
    description="""
    Admin order search.

    ## Filters
    - `phone`: prefix of the customer phone, any format ("+54 9 381" == "549381")
    - `status`: en_proceso, vendido or cancelado
    - `day` (YYYY-MM-DD, UTC) or a `dateFrom`/`dateTo` range
    - All filters use AND semantics

    ## Sorting and pagination
    - `sort`: created_at, updated_at or status; prefix with `-` for descending
    - `page` starts at 1, `pageSize` up to 100
    """,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def list_orders(
    phone: str | None = Query(default=None),
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    day: str | None = Query(default=None, examples=["2025-03-01"]),
    date_from: datetime | None = Query(default=None, alias="dateFrom"),
    date_to: datetime | None = Query(default=None, alias="dateTo"),
    sort: str = Query(default="-created_at"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    use_case: ListOrders = Depends(get_list_orders_use_case),
) -> OrderListResponseDTO:
    request = OrderMapper.to_list_request(
        phone=phone,
        status=order_status,
        day=day,
        date_from=date_from,
        date_to=date_to,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return OrderMapper.to_list_response(use_case.execute(request))


@router.get(
    "/orders/{order_id}",
    response_model=OrderDTO,
    summary="Get an order",
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_order(
    order_id: str,
    use_case: GetOrderById = Depends(get_get_order_by_id_use_case),
) -> OrderDTO:
    order = use_case.execute(GetOrderByIdRequest(order_id=order_id))
    return OrderMapper.to_dto(order)


@router.patch(
    "/orders/{order_id}",
    response_model=OrderDTO,
    summary="Update status, notes or customer",
    dependencies=[Depends(require_admin)],
    description="""
    Partial update. A status change appends an entry to `statusHistory`;
    setting the current status again changes nothing. Items and their
    financing snapshots cannot be edited.
    """,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
def update_order(
    order_id: str,
    payload: UpdateOrderRequestDTO,
    use_case: UpdateOrder = Depends(get_update_order_use_case),
) -> OrderDTO:
    order = use_case.execute(OrderMapper.to_update_request(order_id, payload))
    return OrderMapper.to_dto(order)


@router.delete(
    "/orders/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an order",
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_order(
    order_id: str,
    use_case: DeleteOrder = Depends(get_delete_order_use_case),
) -> Response:
    use_case.execute(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
