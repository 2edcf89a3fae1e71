"""Domain error classes.

Protocol-agnostic errors that represent business failures.
These errors are translated to appropriate formats (HTTP, CLI) by protocol adapters.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Protocol-agnostic. Contains business error information that
    can be translated to HTTP or any other transport format.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., field names, values)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Used for domain invariant violations and cross-field validation.

    Examples:
        - months < 1 on a financing plan
        - min_price > max_price
        - Order without items
        - Financing requested for a product with financing disabled

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "months", "message": "Must be >= 1"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class NotFoundError(DomainError):
    """Resource not found.

    Examples:
        - Order with ID not found
        - Financing group not found

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        """Create a not found error.

        Args:
            resource: Type of resource (e.g., "Order", "FinancingGroup")
            identifier: Resource identifier (e.g., UUID, slug)
            **context: Additional context
        """
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class PlanNotFoundError(NotFoundError):
    """A financing plan referenced by a request body could not be resolved.

    Raised when an order item references a plan by id or legacy code that
    does not exist at resolution time. Aborts the whole order creation.

    Protocol mappings:
        - REST: 422 Unprocessable Entity (the request references it, the URL does not)
    """

    error_code: str = "PLAN_NOT_FOUND"

    def __init__(self, identifier: str, **context: Any) -> None:
        super().__init__("FinancingPlan", identifier, **context)


class ProductNotFoundError(NotFoundError):
    """A product referenced by an order item does not exist.

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, identifier: str, **context: Any) -> None:
        super().__init__("Product", identifier, **context)


class ConflictError(DomainError):
    """Business constraint conflict.

    Examples:
        - Duplicate financing group key
        - Duplicate legacy plan code

    Protocol mappings:
        - REST: 409 Conflict
    """

    error_code: str = "CONFLICT"


class UnauthorizedError(DomainError):
    """Authentication required or failed.

    Protocol mappings:
        - REST: 401 Unauthorized
    """

    error_code: str = "UNAUTHORIZED"


class ForbiddenError(DomainError):
    """Authenticated but insufficient permissions.

    Protocol mappings:
        - REST: 403 Forbidden
    """

    error_code: str = "FORBIDDEN"


class RepositoryUnavailableError(DomainError):
    """The backing store could not be reached.

    Preview widgets recover from this with the fallback quote table.
    Order creation never does: it surfaces to the caller.

    Protocol mappings:
        - REST: 503 Service Unavailable
    """

    error_code: str = "REPOSITORY_UNAVAILABLE"


class ArithmeticGuardError(DomainError):
    """Quote inputs that cannot be computed (non-finite price or down payment, zero months).

    Quoting treats this as "no eligible plan" rather than a failure.
    """

    error_code: str = "ARITHMETIC_GUARD"


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"
