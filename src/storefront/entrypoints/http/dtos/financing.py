from pydantic import ConfigDict, Field

from storefront.entrypoints.http.dtos.base import FRACTION_PATTERN, MONEY_PATTERN, CamelModel
from storefront.entrypoints.http.error_responses import ErrorDetail


class QuoteItemDTO(CamelModel):
    """One installment option. Money and fractions are decimal strings."""

    plan_id: str | None = Field(default=None, description="Plan id (absent on fallback quotes)")
    code: int | None = Field(default=None, description="Legacy numeric plan code")
    description: str = Field(examples=["6 CUOTAS"])
    months: int = Field(examples=[6])
    surcharge_pct: str = Field(description="Surcharge over the financed balance", examples=["0.3"])
    down_pct: str = Field(examples=["0.15"])
    down_amount: str = Field(examples=["15000.00"])
    balance: str = Field(examples=["85000.00"])
    surcharge_amount: str = Field(examples=["25500.00"])
    total: str = Field(description="Balance plus surcharge", examples=["110500.00"])
    monthly: str = Field(examples=["18416.67"])


class QuoteResponseDTO(CamelModel):
    price: str = Field(examples=["100000"])
    down_pct: str = Field(examples=["0.15"])
    items: list[QuoteItemDTO] = Field(
        description="Ordered by months, then surcharge. Empty when nothing is eligible."
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "price": "100000",
                "downPct": "0.15",
                "items": [
                    {
                        "planId": "3f1c2b1e-8a57-4c0e-9d49-5b7a0d7f4b11",
                        "code": 2,
                        "description": "6 CUOTAS",
                        "months": 6,
                        "surchargePct": "0.30",
                        "downPct": "0.15",
                        "downAmount": "15000.00",
                        "balance": "85000.00",
                        "surchargeAmount": "25500.00",
                        "total": "110500.00",
                        "monthly": "18416.67",
                    }
                ],
            }
        }
    )


class FinancingPlanPayloadDTO(CamelModel):
    """Create/update payload for a financing plan."""

    code: int | None = Field(
        default=None, description="Legacy numeric code", ge=0, le=2_147_483_647
    )
    description: str = Field(min_length=1, max_length=200, examples=["6 CUOTAS S/I"])
    months: int = Field(ge=1, le=360, examples=[6])
    surcharge_pct: str = Field(
        description="Surcharge fraction (0.30 = 30%)",
        examples=["0.30"],
        pattern=FRACTION_PATTERN,
    )
    group_key: str | None = Field(
        default="default",
        max_length=64,
        description="Group the plan belongs to; null or empty makes it available to every group",
        examples=["default"],
    )
    active: bool = True
    min_price: str | None = Field(default=None, pattern=MONEY_PATTERN, examples=["50000"])
    max_price: str | None = Field(default=None, pattern=MONEY_PATTERN, examples=["500000"])
    include_categories: list[str] | str = Field(
        default_factory=list,
        description="Categories the plan is limited to; a 'a|b' string is also accepted",
    )
    exclude_categories: list[str] | str = Field(
        default_factory=list,
        description="Categories the plan never applies to; a 'a|b' string is also accepted",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": 5,
                "description": "6 CUOTAS S/I",
                "months": 6,
                "surchargePct": "0",
                "groupKey": "default",
                "active": True,
                "minPrice": None,
                "maxPrice": None,
                "includeCategories": [],
                "excludeCategories": ["bicicletas"],
            }
        }
    )


class FinancingPlanDTO(CamelModel):
    id: str
    code: int | None = None
    description: str
    months: int
    surcharge_pct: str
    group_key: str | None = None
    active: bool
    min_price: str | None = None
    max_price: str | None = None
    include_categories: list[str]
    exclude_categories: list[str]


class PublicPlansResponseDTO(CamelModel):
    default_down_pct: str = Field(examples=["0.15"])
    plans: list[FinancingPlanDTO]


class RejectedRowDTO(CamelModel):
    index: int = Field(description="Position of the row in the submitted array")
    errors: list[ErrorDetail]


class BulkUpsertResponseDTO(CamelModel):
    count: int = Field(description="Rows inserted or updated")
    rejected: list[RejectedRowDTO]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "count": 7,
                "rejected": [
                    {
                        "index": 3,
                        "errors": [
                            {"field": "months", "message": "Must be >= 1", "code": "INVALID_VALUE"}
                        ],
                    }
                ],
            }
        }
    )


class FinancingGroupPayloadDTO(CamelModel):
    key: str = Field(
        description="Unique slug referenced by plans and products",
        examples=["celulares"],
        min_length=1,
    )
    name: str = Field(min_length=1, examples=["Celulares"])
    description: str | None = None
    sort_order: int = 0
    active: bool = True


class FinancingGroupDTO(CamelModel):
    id: str
    key: str
    name: str
    description: str | None = None
    sort_order: int
    active: bool
