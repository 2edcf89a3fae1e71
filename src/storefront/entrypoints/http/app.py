from fastapi import FastAPI

from storefront.entrypoints.http.exception_handlers import register_exception_handlers
from storefront.entrypoints.http.routes.checkout import router as checkout_router
from storefront.entrypoints.http.routes.financing import router as financing_router
from storefront.entrypoints.http.routes.groups import router as groups_router
from storefront.entrypoints.http.routes.health import router as health_router
from storefront.entrypoints.http.routes.orders import router as orders_router
from storefront.entrypoints.http.routes.products import router as products_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="""
        Storefront and back-office API centred on installment financing.

        ## Features
        - Quote installment plans for a price or a product
        - Manage financing plans and groups (single and bulk)
        - Place orders with financing terms frozen per item
        - Build the WhatsApp checkout message for a cart

        ## Authentication
        Admin endpoints require the `X-Admin-Token` header.

        ## Money
        All monetary values and fractions are decimal strings.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
        contact={
            "name": "Storefront Team",
            "email": "dev@storefront.example",
        },
        license_info={
            "name": "Proprietary",
        },
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(financing_router, prefix="/v1")
    app.include_router(groups_router, prefix="/v1")
    app.include_router(products_router, prefix="/v1")
    app.include_router(orders_router, prefix="/v1")
    app.include_router(checkout_router, prefix="/v1")

    return app


app = build_app()
