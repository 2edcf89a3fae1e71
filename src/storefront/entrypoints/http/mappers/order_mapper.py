from __future__ import annotations

from datetime import date, datetime

from storefront.domain.errors import ValidationError
from storefront.domain.order import (
    Customer,
    Order,
    OrderFilters,
    OrderItem,
    OrderSort,
    OrderStatus,
    Paging,
)
from storefront.entrypoints.http.dtos.orders import (
    CreateOrderRequestDTO,
    CustomerDTO,
    OrderDTO,
    OrderItemDTO,
    OrderItemFinancingDTO,
    OrderListResponseDTO,
    OrderTotalsDTO,
    StatusChangeDTO,
    UpdateOrderRequestDTO,
)
from storefront.entrypoints.http.mappers.conversions import parse_decimal
from storefront.use_cases.create_order import (
    CreateOrderItem,
    CreateOrderRequest,
    FinancingChoice,
)
from storefront.use_cases.list_orders import ListOrdersRequest, ListOrdersResponse
from storefront.use_cases.update_order import CustomerPatch, UpdateOrderRequest


class OrderMapper:
    """Maps between REST DTOs and domain models for orders."""

    @staticmethod
    def to_create_request(dto: CreateOrderRequestDTO) -> CreateOrderRequest:
        """
        Raises:
            ValidationError: If discount or shipping are not decimals
        """
        errors: list[dict[str, str]] = []
        discount_total = parse_decimal(dto.discount_total, "discountTotal", errors)
        shipping_total = parse_decimal(dto.shipping_total, "shippingTotal", errors)
        if errors:
            raise ValidationError(errors=errors)

        return CreateOrderRequest(
            customer=Customer(
                name=dto.customer.name.strip(),
                phone=dto.customer.phone,
                email=dto.customer.email or None,
                doc_number=dto.customer.doc_number or None,
            ),
            items=tuple(
                CreateOrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    financing=(
                        FinancingChoice(plan_id=item.financing.plan_id, code=item.financing.code)
                        if item.financing is not None
                        else None
                    ),
                )
                for item in dto.items
            ),
            notes=dto.notes,
            currency=dto.currency,
            discount_total=discount_total,
            shipping_total=shipping_total,
        )

    @staticmethod
    def to_list_request(
        phone: str | None = None,
        status: OrderStatus | None = None,
        day: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        sort: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ListOrdersRequest:
        """
        Raises:
            ValidationError: If day is not an ISO date
        """
        parsed_day: date | None = None
        if day:
            try:
                parsed_day = date.fromisoformat(day)
            except ValueError:
                raise ValidationError(
                    errors=[
                        {
                            "field": "day",
                            "message": f"Must be a date in YYYY-MM-DD format: {day}",
                            "code": "INVALID_DATE",
                        }
                    ]
                )

        return ListOrdersRequest(
            filters=OrderFilters(
                phone_prefix=phone or None,
                status=status,
                day=parsed_day,
                date_from=date_from,
                date_to=date_to,
            ),
            sort=OrderSort.parse(sort),
            paging=Paging(page=page, page_size=page_size),
        )

    @staticmethod
    def to_update_request(order_id: str, dto: UpdateOrderRequestDTO) -> UpdateOrderRequest:
        customer = None
        if dto.customer is not None:
            customer = CustomerPatch(
                name=dto.customer.name,
                phone=dto.customer.phone,
                email=dto.customer.email,
                doc_number=dto.customer.doc_number,
            )
        return UpdateOrderRequest(
            order_id=order_id,
            status=dto.status,
            reason=dto.reason,
            notes=dto.notes,
            customer=customer,
        )

    @staticmethod
    def to_item_dto(item: OrderItem) -> OrderItemDTO:
        financing = None
        snapshot = item.financing
        if snapshot is not None:
            financing = OrderItemFinancingDTO(
                plan_ref=snapshot.plan_ref,
                mode_applied=snapshot.mode_applied.value,
                group_key=snapshot.group_key,
                plan_code=snapshot.plan_code,
                months=snapshot.months,
                surcharge_pct=str(snapshot.surcharge_pct),
                down_pct=str(snapshot.down_pct),
                down_amount=str(snapshot.down_amount),
                surcharge_amount=str(snapshot.surcharge_amount),
                total_with_surcharge=str(snapshot.total_with_surcharge),
                installment_amount=str(snapshot.installment_amount),
            )

        return OrderItemDTO(
            product_id=item.product_id,
            product_title=item.product_title,
            category=item.category,
            subcategory=item.subcategory,
            unit_price=str(item.unit_price),
            quantity=item.quantity,
            sub_total=str(item.sub_total),
            grand_total=str(item.grand_total),
            financing=financing,
        )

    @staticmethod
    def to_dto(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id or "",
            status=order.status,
            currency=order.currency,
            customer=CustomerDTO(
                name=order.customer.name,
                phone=order.customer.phone,
                email=order.customer.email,
                doc_number=order.customer.doc_number,
            ),
            items=[OrderMapper.to_item_dto(item) for item in order.items],
            totals=OrderTotalsDTO(
                items_sub_total=str(order.totals.items_sub_total),
                surcharge_total=str(order.totals.surcharge_total),
                discount_total=str(order.totals.discount_total),
                shipping_total=str(order.totals.shipping_total),
                grand_total=str(order.totals.grand_total),
            ),
            notes=order.notes,
            status_history=[
                StatusChangeDTO(
                    at=change.at,
                    from_status=change.from_status,
                    to_status=change.to_status,
                    reason=change.reason,
                )
                for change in order.status_history
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    @staticmethod
    def to_list_response(response: ListOrdersResponse) -> OrderListResponseDTO:
        return OrderListResponseDTO(
            orders=[OrderMapper.to_dto(order) for order in response.orders],
            total=response.total,
            page=response.page,
            page_size=response.page_size,
            total_pages=response.total_pages,
            has_more=response.has_more,
        )
