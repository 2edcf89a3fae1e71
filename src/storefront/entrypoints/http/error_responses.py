"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors.

    Used in validation errors to indicate which field failed and why.
    """

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "months",
                "message": "Must be >= 1",
                "code": "INVALID_VALUE",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Supports:
    - Simple errors (just detail and code)
    - Multi-field validation errors (detail + errors array)
    - Error codes for i18n (code field can be used for translation keys)

    Examples:
        Simple error:
            {
                "detail": "Order with identifier '...' not found",
                "code": "NOT_FOUND"
            }

        Unresolvable plan reference in an order body:
            {
                "detail": "FinancingPlan with identifier '...' not found",
                "code": "PLAN_NOT_FOUND"
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Order with identifier 'abc' not found", "code": "NOT_FOUND"},
                {
                    "detail": "FinancingPlan with identifier '42' not found",
                    "code": "PLAN_NOT_FOUND",
                },
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {
                            "field": "min_price",
                            "message": "Must be less than or equal to max_price",
                            "code": "INVALID_RANGE",
                        },
                        {
                            "field": "items",
                            "message": "Must contain at least one item",
                            "code": "REQUIRED",
                        },
                    ],
                },
            ]
        }
    )
