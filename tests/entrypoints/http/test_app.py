"""
Unit tests for FastAPI application setup and configuration.

This test suite verifies the application structure and wiring:
- build_app() creates properly configured FastAPI instance
- Application metadata (title, version, docs URLs)
- Router registration under the /v1 prefix
- OpenAPI schema generation (camelCase query parameters)
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.entrypoints.http.app import build_app


# ==============================================================================
# Application Creation
# ==============================================================================


def test_build_app_returns_fastapi_instance() -> None:
    assert isinstance(build_app(), FastAPI)


def test_build_app_creates_new_instance_each_call() -> None:
    """build_app() creates a new app instance for each call (not cached)."""
    assert build_app() is not build_app()


def test_app_metadata() -> None:
    app = build_app()

    assert app.title == "Storefront API"
    assert app.version == "0.1.0"
    assert "installment financing" in app.description
    assert app.contact is not None
    assert app.contact["name"] == "Storefront Team"
    assert app.license_info == {"name": "Proprietary"}


def test_app_documentation_endpoints_are_accessible() -> None:
    client = TestClient(build_app())

    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"


# ==============================================================================
# Router Registration
# ==============================================================================


@pytest.mark.parametrize(
    ("path", "method"),
    [
        ("/health", "get"),
        ("/v1/financing/quote", "get"),
        ("/v1/financing/public", "get"),
        ("/v1/financing/plans", "get"),
        ("/v1/financing/plans", "post"),
        ("/v1/financing/plans/bulk", "post"),
        ("/v1/financing/plans/{plan_id}", "put"),
        ("/v1/financing/plans/{plan_id}", "delete"),
        ("/v1/financing/groups", "get"),
        ("/v1/financing/groups/{group_id}", "delete"),
        ("/v1/products/{product_id}/financing/quote", "get"),
        ("/v1/orders", "post"),
        ("/v1/orders", "get"),
        ("/v1/orders/{order_id}", "patch"),
        ("/v1/checkout/whatsapp", "post"),
    ],
)
def test_routes_are_registered(path: str, method: str) -> None:
    """Verified via the OpenAPI schema (doesn't trigger dependencies)."""
    paths = build_app().openapi()["paths"]

    assert method in paths[path]


def test_versioned_routes_are_not_exposed_without_prefix() -> None:
    paths = build_app().openapi()["paths"]

    assert "/financing/quote" not in paths
    assert "/orders" not in paths


def test_quote_endpoint_documents_camel_case_parameters() -> None:
    schema = build_app().openapi()
    operation = schema["paths"]["/v1/financing/quote"]["get"]

    assert operation["tags"] == ["Financing"]
    assert operation["summary"] == "Quote installment options for a price"
    param_names = {p["name"] for p in operation["parameters"]}
    assert {"price", "downPct", "planIds", "groupKey", "category", "best"} <= param_names


def test_admin_routes_document_token_header() -> None:
    schema = build_app().openapi()
    operation = schema["paths"]["/v1/orders"]["get"]

    header_names = {p["name"] for p in operation["parameters"] if p["in"] == "header"}
    assert header_names == {"x-admin-token"}


# ==============================================================================
# Route Accessibility
# ==============================================================================


def test_health_endpoint_responds() -> None:
    response = TestClient(build_app()).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_app_returns_404_for_unknown_routes() -> None:
    client = TestClient(build_app())

    assert client.get("/unknown").status_code == 404
    assert client.get("/v1/unknown").status_code == 404


def test_module_level_app_is_from_build_app() -> None:
    from storefront.entrypoints.http.app import app

    assert isinstance(app, FastAPI)
    assert app.title == "Storefront API"
