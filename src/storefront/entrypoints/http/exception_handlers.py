"""FastAPI exception handlers.

Every error leaves the API with the same envelope:

    {"detail": "...", "code": "...", "errors": [{"field", "message", "code"}]}

`errors` is only present when the failure can be pinned to request fields.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.errors import DomainError, ValidationError

logger = logging.getLogger(__name__)

UNPROCESSABLE = 422  # HTTP_422_UNPROCESSABLE_CONTENT

# Error code -> HTTP status. Unknown codes fall back to 400.
STATUS_CODE_MAP: dict[str, int] = {
    "VALIDATION_ERROR": UNPROCESSABLE,
    # A reference inside the request body could not be resolved; the URL itself is fine
    "PLAN_NOT_FOUND": UNPROCESSABLE,
    "PRODUCT_NOT_FOUND": UNPROCESSABLE,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "REPOSITORY_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Pydantic prefixes every location with where the value came from
_LOCATION_SOURCES = ("body", "query", "header")


def _request_fields(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


def _envelope(
    status_code: int,
    detail: str,
    code: str,
    errors: list[dict[str, str]] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"detail": detail, "code": code}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """
    Map a DomainError to its status through STATUS_CODE_MAP.

    Server-side failures (5xx, e.g. the database being down) are logged as
    errors with their context; caller mistakes are logged at info.
    """
    status_code = STATUS_CODE_MAP.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    if status_code >= 500:
        logger.error(
            "Domain error occurred",
            exc_info=exc,
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                "context": exc.context,
                **_request_fields(request),
            },
        )
    else:
        logger.info(
            "Client error",
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                **_request_fields(request),
            },
        )

    # Context stays in the log; a context "code" must not replace the error code
    errors = exc.errors if isinstance(exc, ValidationError) else None
    return _envelope(status_code, detail=exc.message, code=exc.error_code, errors=errors)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Shape pydantic failures (bad decimals, out-of-range page sizes,
    missing customer fields) like domain validation errors.

    Field paths use the camelCase names clients sent, without the
    body/query/header prefix.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in _LOCATION_SOURCES),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info("Request validation error", extra={"errors": errors, **_request_fields(request)})

    return _envelope(
        UNPROCESSABLE, detail="Invalid request parameters", code="VALIDATION_ERROR", errors=errors
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Conversions that slipped past validation (enum or Decimal parsing in mappers)."""
    logger.info("Value error", extra={"error_message": str(exc), **_request_fields(request)})

    return _envelope(UNPROCESSABLE, detail=str(exc), code="INVALID_VALUE")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last resort. The traceback goes to the log, never to the client."""
    logger.error(
        "Unexpected error occurred",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            **_request_fields(request),
        },
    )

    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
        code="INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above, most specific first. Call once per app."""
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info("Exception handlers registered")
