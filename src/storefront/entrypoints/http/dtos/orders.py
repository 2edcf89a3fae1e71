from datetime import datetime

from pydantic import AliasChoices, ConfigDict, Field

from storefront.domain.order import Currency, OrderStatus
from storefront.entrypoints.http.dtos.base import MAX_QUANTITY, MONEY_PATTERN, CamelModel


class CustomerDTO(CamelModel):
    name: str = Field(examples=["Juan Pérez"])
    phone: str = Field(
        description="Any format; stored as digits only",
        examples=["+54 9 381 555-1234"],
    )
    email: str | None = Field(default=None, examples=["juan@example.com"])
    doc_number: str | None = Field(default=None, examples=["30123456"])


class FinancingChoiceDTO(CamelModel):
    """Plan chosen for a line. planId is preferred; code is the legacy lookup."""

    plan_id: str | None = None
    code: int | None = None


class CreateOrderItemDTO(CamelModel):
    product_id: str = Field(
        validation_alias=AliasChoices("productId", "_id_product", "product_id"),
        serialization_alias="productId",
    )
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    financing: FinancingChoiceDTO | None = None


class CreateOrderRequestDTO(CamelModel):
    """
    Order placement payload.

    Totals, installment amounts and titles are never taken from the client:
    they are recomputed from the product and plan records.
    """

    customer: CustomerDTO
    items: list[CreateOrderItemDTO]
    notes: str | None = None
    currency: Currency = Currency.ARS
    discount_total: str = Field(default="0", pattern=MONEY_PATTERN)
    shipping_total: str = Field(default="0", pattern=MONEY_PATTERN)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer": {"name": "Juan Pérez", "phone": "+54 9 381 555-1234"},
                "items": [
                    {
                        "productId": "7b0c5a3e-1f55-4a57-9a1a-0c8a1f3f6e21",
                        "quantity": 2,
                        "financing": {"planId": "3f1c2b1e-8a57-4c0e-9d49-5b7a0d7f4b11"},
                    },
                    {"productId": "0d4f0e1c-3c9b-4a41-8d8f-2f7f5a9b1c33", "quantity": 1},
                ],
                "notes": "Retira en sucursal",
            }
        }
    )


class OrderItemFinancingDTO(CamelModel):
    plan_ref: str | None = None
    mode_applied: str = Field(
        validation_alias=AliasChoices("modeApplied", "mode", "mode_applied"),
        serialization_alias="modeApplied",
    )
    group_key: str | None = None
    plan_code: int | None = None
    months: int
    surcharge_pct: str
    down_pct: str
    down_amount: str
    surcharge_amount: str
    total_with_surcharge: str
    installment_amount: str


class OrderItemDTO(CamelModel):
    product_id: str = Field(
        validation_alias=AliasChoices("productId", "_id_product", "product_id"),
        serialization_alias="productId",
    )
    product_title: str = Field(
        validation_alias=AliasChoices("productTitle", "title", "product_title"),
        serialization_alias="productTitle",
    )
    category: str
    subcategory: str | None = None
    unit_price: str
    quantity: int
    sub_total: str
    grand_total: str
    financing: OrderItemFinancingDTO | None = None


class OrderTotalsDTO(CamelModel):
    items_sub_total: str
    surcharge_total: str
    discount_total: str
    shipping_total: str
    grand_total: str


class StatusChangeDTO(CamelModel):
    at: datetime
    from_status: OrderStatus | None = None
    to_status: OrderStatus
    reason: str | None = None


class OrderDTO(CamelModel):
    id: str
    status: OrderStatus
    currency: Currency
    customer: CustomerDTO
    items: list[OrderItemDTO]
    totals: OrderTotalsDTO
    notes: str | None = None
    status_history: list[StatusChangeDTO]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponseDTO(CamelModel):
    orders: list[OrderDTO]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


class CustomerPatchDTO(CamelModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    doc_number: str | None = None


class UpdateOrderRequestDTO(CamelModel):
    status: OrderStatus | None = None
    reason: str | None = Field(default=None, description="Recorded on the status history entry")
    notes: str | None = None
    customer: CustomerPatchDTO | None = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "vendido", "reason": "Pago confirmado"}}
    )
