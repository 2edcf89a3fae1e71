from pydantic import AliasChoices, ConfigDict, Field

from storefront.entrypoints.http.dtos.base import MAX_QUANTITY, MONEY_PATTERN, CamelModel
from storefront.entrypoints.http.dtos.financing import QuoteItemDTO


class CartLineDTO(CamelModel):
    id: str = Field(description="Cart item id, the key used in selections")
    name: str = Field(
        validation_alias=AliasChoices("name", "title", "productTitle"),
        examples=["Samsung Galaxy A5"],
    )
    price: str = Field(pattern=MONEY_PATTERN, examples=["250000"])
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)


class CheckoutRequestDTO(CamelModel):
    customer_name: str = Field(min_length=1, examples=["Juan"])
    lines: list[CartLineDTO]
    selections: dict[str, QuoteItemDTO | None] = Field(
        default_factory=dict,
        description="Cart item id -> chosen quote item; null or missing means cash",
    )
    needs_shipping: bool = False
    address: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customerName": "Juan",
                "lines": [
                    {"id": "p1", "name": "Samsung Galaxy A5", "price": "250000", "quantity": 1}
                ],
                "selections": {"p1": None},
                "needsShipping": True,
                "address": "San Martín 123",
            }
        }
    )


class CheckoutResponseDTO(CamelModel):
    text: str
    url: str = Field(examples=["https://wa.me/5493816592823?text=..."])
    subtotal: str
    shipping: str
    total: str
