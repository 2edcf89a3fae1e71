"""
Test suite for the /v1/financing routes.

This test suite verifies the HTTP endpoint behavior:
- Route parses query/body parameters and validates them
- Route delegates to use case via dependency injection
- Route uses mapper to convert between DTOs and domain models
- Route returns proper HTTP status codes and camelCase responses
- Admin routes are guarded by the X-Admin-Token header

Use cases run against in-memory repositories, so quotes are real.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.adapters.in_memory_financing_plan_repository import (
    InMemoryFinancingPlanRepository,
)
from storefront.domain.financing import FinancingPlan, Quote
from storefront.entrypoints.http.dependencies import (
    get_create_plan_use_case,
    get_delete_plan_use_case,
    get_list_plans_use_case,
    get_list_public_plans_use_case,
    get_quote_financing_use_case,
    get_update_plan_use_case,
    get_upsert_plans_use_case,
)
from storefront.entrypoints.http.exception_handlers import register_exception_handlers
from storefront.entrypoints.http.routes.financing import router
from storefront.use_cases.financing_plans import (
    CreatePlan,
    DeletePlan,
    ListPlans,
    ListPublicPlans,
    UpdatePlan,
    UpsertPlans,
)
from storefront.use_cases.quote_financing import QuoteFinancing


ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def repository() -> InMemoryFinancingPlanRepository:
    return InMemoryFinancingPlanRepository(
        [
            FinancingPlan(
                id="p3", code=1, description="3 CUOTAS", months=3, surcharge_pct=Decimal("0.30")
            ),
            FinancingPlan(
                id="p6", code=2, description="6 CUOTAS", months=6, surcharge_pct=Decimal("0.30")
            ),
            FinancingPlan(
                id="p6si",
                code=5,
                description="6 CUOTAS S/I",
                months=6,
                surcharge_pct=Decimal("0"),
                group_key="celulares",
            ),
            FinancingPlan(
                id="off",
                code=9,
                description="INACTIVO",
                months=12,
                surcharge_pct=Decimal("0.50"),
                active=False,
            ),
        ]
    )


@pytest.fixture
def app(
    repository: InMemoryFinancingPlanRepository, monkeypatch: pytest.MonkeyPatch
) -> FastAPI:
    """Create a test FastAPI app with financing router and exception handlers."""
    monkeypatch.setenv("ADMIN_API_TOKEN", ADMIN_TOKEN)

    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")

    overrides = {
        get_quote_financing_use_case: lambda: QuoteFinancing(repository),
        get_list_public_plans_use_case: lambda: ListPublicPlans(repository, Decimal("0.15")),
        get_list_plans_use_case: lambda: ListPlans(repository),
        get_create_plan_use_case: lambda: CreatePlan(repository),
        get_update_plan_use_case: lambda: UpdatePlan(repository),
        get_delete_plan_use_case: lambda: DeletePlan(repository),
        get_upsert_plans_use_case: lambda: UpsertPlans(repository),
    }
    test_app.dependency_overrides.update(overrides)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app, raise_server_exceptions=False)


# ==============================================================================
# GET /v1/financing/quote
# ==============================================================================


def test_quote_returns_ordered_items_as_strings(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "100000"})

    assert response.status_code == 200
    data = response.json()
    assert data["price"] == "100000"
    assert data["downPct"] == "0.15"
    assert [item["planId"] for item in data["items"]] == ["p3", "p6si", "p6"]

    six = data["items"][2]
    assert six == {
        "planId": "p6",
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


def test_quote_best_keeps_one_plan_per_term(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "100000", "best": "true"})

    assert [item["planId"] for item in response.json()["items"]] == ["p3", "p6si"]


def test_quote_plan_ids_restrict_selection(client: TestClient) -> None:
    response = client.get(
        "/v1/financing/quote", params={"price": "100000", "planIds": "p6, off"}
    )

    assert response.status_code == 200
    assert [item["planId"] for item in response.json()["items"]] == ["p6"]


def test_quote_with_full_down_payment_has_zero_installments(client: TestClient) -> None:
    response = client.get(
        "/v1/financing/quote", params={"price": "100000", "downPct": "1", "planIds": "p6"}
    )

    item = response.json()["items"][0]
    assert item["balance"] == "0.00"
    assert item["total"] == "0.00"
    assert item["monthly"] == "0.00"


def test_quote_nan_price_returns_empty_items(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "NaN"})

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_quote_down_pct_out_of_range_is_rejected(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "100000", "downPct": "1.5"})

    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "INVALID_RANGE"


def test_quote_non_numeric_price_is_rejected(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "abc"})

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "price"
    assert data["errors"][0]["code"] == "INVALID_DECIMAL"


def test_quote_requires_price(client: TestClient) -> None:
    response = client.get("/v1/financing/quote")

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "price"


def test_quote_price_beyond_storable_amounts_is_rejected(client: TestClient) -> None:
    response = client.get("/v1/financing/quote", params={"price": "1E30"})

    assert response.status_code == 422
    error = response.json()["errors"][0]
    assert error["field"] == "price"
    assert error["code"] == "INVALID_RANGE"


def test_quote_delegates_parsed_request(app: FastAPI, client: TestClient) -> None:
    mock_use_case = Mock()
    mock_use_case.execute.return_value = Quote(
        price=Decimal("250000"), down_pct=Decimal("0.15")
    )
    app.dependency_overrides[get_quote_financing_use_case] = lambda: mock_use_case

    client.get(
        "/v1/financing/quote",
        params={"price": "250000", "groupKey": "celulares", "category": "Celulares"},
    )

    request = mock_use_case.execute.call_args.args[0]
    assert request.price == Decimal("250000")
    assert request.group_key == "celulares"
    assert request.category == "Celulares"
    assert mock_use_case.execute.call_args.kwargs == {"best_only": False}


# ==============================================================================
# GET /v1/financing/public and /v1/financing/plans
# ==============================================================================


def test_public_plans_are_active_only(client: TestClient) -> None:
    response = client.get("/v1/financing/public")

    assert response.status_code == 200
    data = response.json()
    assert data["defaultDownPct"] == "0.15"
    assert [plan["id"] for plan in data["plans"]] == ["p3", "p6si", "p6"]


def test_list_plans_returns_all_records(client: TestClient) -> None:
    response = client.get("/v1/financing/plans")

    assert response.status_code == 200
    assert [plan["id"] for plan in response.json()] == ["p3", "p6si", "p6", "off"]


def test_list_plans_active_only(client: TestClient) -> None:
    response = client.get("/v1/financing/plans", params={"activeOnly": "true"})

    assert "off" not in [plan["id"] for plan in response.json()]


# ==============================================================================
# Plan administration
# ==============================================================================


def test_create_plan(client: TestClient, repository: InMemoryFinancingPlanRepository) -> None:
    response = client.post(
        "/v1/financing/plans",
        headers=ADMIN_HEADERS,
        json={
            "code": 4,
            "description": "PROMO 10 CUOTAS",
            "months": 10,
            "surchargePct": "0.30",
            "excludeCategories": "bicicletas|motos",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["groupKey"] == "default"
    assert data["excludeCategories"] == ["bicicletas", "motos"]
    assert repository.get_by_code(4) is not None


def test_create_plan_requires_admin_token(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans",
        json={"description": "X", "months": 3, "surchargePct": "0"},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Admin token required", "code": "UNAUTHORIZED"}


def test_create_plan_with_wrong_token(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans",
        headers={"X-Admin-Token": "nope"},
        json={"description": "X", "months": 3, "surchargePct": "0"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid admin token"


def test_create_plan_with_taken_code_conflicts(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans",
        headers=ADMIN_HEADERS,
        json={"code": 1, "description": "OTRO", "months": 3, "surchargePct": "0.1"},
    )

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_create_plan_with_inverted_price_bounds(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans",
        headers=ADMIN_HEADERS,
        json={
            "description": "ALTO VALOR",
            "months": 12,
            "surchargePct": "0.5",
            "minPrice": "500000",
            "maxPrice": "100000",
        },
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "INVALID_RANGE"


def test_create_plan_with_zero_months_fails_request_validation(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans",
        headers=ADMIN_HEADERS,
        json={"description": "X", "months": 0, "surchargePct": "0"},
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "months"


@pytest.mark.parametrize(
    "overrides",
    [
        {"surchargePct": "150"},
        {"description": "x" * 201},
        {"maxPrice": "100000000000"},
    ],
)
def test_create_plan_beyond_storage_limits_is_rejected(
    client: TestClient, overrides: dict[str, str]
) -> None:
    payload = {"description": "LARGO", "months": 6, "surchargePct": "0.3", **overrides}

    response = client.post("/v1/financing/plans", headers=ADMIN_HEADERS, json=payload)

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_update_plan(client: TestClient, repository: InMemoryFinancingPlanRepository) -> None:
    response = client.put(
        "/v1/financing/plans/p6",
        headers=ADMIN_HEADERS,
        json={"code": 2, "description": "6 CUOTAS", "months": 6, "surchargePct": "0.25"},
    )

    assert response.status_code == 200
    assert response.json()["surchargePct"] == "0.25"
    updated = repository.get_by_id("p6")
    assert updated is not None
    assert updated.surcharge_pct == Decimal("0.25")


def test_update_missing_plan_returns_404(client: TestClient) -> None:
    response = client.put(
        "/v1/financing/plans/missing",
        headers=ADMIN_HEADERS,
        json={"description": "X", "months": 3, "surchargePct": "0"},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_delete_plan(client: TestClient, repository: InMemoryFinancingPlanRepository) -> None:
    response = client.delete("/v1/financing/plans/p3", headers=ADMIN_HEADERS)

    assert response.status_code == 204
    assert repository.get_by_id("p3") is None
    assert client.delete("/v1/financing/plans/p3", headers=ADMIN_HEADERS).status_code == 404


# ==============================================================================
# POST /v1/financing/plans/bulk
# ==============================================================================


def test_bulk_upsert_reports_rejected_rows_by_position(
    client: TestClient, repository: InMemoryFinancingPlanRepository
) -> None:
    response = client.post(
        "/v1/financing/plans/bulk",
        headers=ADMIN_HEADERS,
        json=[
            {"code": 1, "description": "3 CUOTAS", "months": 3, "surchargePct": "0.35"},
            {"code": 12, "description": "ROTO", "months": 0, "surchargePct": "0.1"},
            {
                "code": 10,
                "description": "12 CUOTAS ALTO VALOR",
                "months": 12,
                "surchargePct": "0.50",
                "minPrice": "900",
                "maxPrice": "100",
            },
            {
                "code": 11,
                "description": "CELU 18 CUOTAS + AURI",
                "months": 18,
                "surchargePct": "1.80",
                "includeCategories": "celulares",
            },
        ],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [row["index"] for row in data["rejected"]] == [1, 2]
    assert data["rejected"][0]["errors"][0]["field"] == "months"
    assert data["rejected"][1]["errors"][0]["code"] == "INVALID_RANGE"

    updated = repository.get_by_code(1)
    assert updated is not None
    assert updated.surcharge_pct == Decimal("0.35")
    created = repository.get_by_code(11)
    assert created is not None
    assert created.include_categories == ("celulares",)


def test_bulk_upsert_requires_an_array(client: TestClient) -> None:
    response = client.post(
        "/v1/financing/plans/bulk",
        headers=ADMIN_HEADERS,
        json={"code": 1, "description": "3 CUOTAS", "months": 3, "surchargePct": "0.35"},
    )

    assert response.status_code == 422


def test_bulk_upsert_requires_admin_token(client: TestClient) -> None:
    response = client.post("/v1/financing/plans/bulk", json=[])

    assert response.status_code == 401


def test_bulk_upsert_rejects_rows_beyond_storage_limits(
    client: TestClient, repository: InMemoryFinancingPlanRepository
) -> None:
    response = client.post(
        "/v1/financing/plans/bulk",
        headers=ADMIN_HEADERS,
        json=[
            {"code": 20, "description": "x" * 201, "months": 3, "surchargePct": "0.1"},
            {"code": 21, "description": "CARO", "months": 3, "surchargePct": "150"},
            {"code": 22, "description": "TOPE", "months": 3, "surchargePct": "0", "maxPrice": "1E11"},
            {"code": 23, "description": "OK", "months": 3, "surchargePct": "0.1"},
        ],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert [row["index"] for row in data["rejected"]] == [0, 1, 2]
    assert repository.get_by_code(23) is not None
    assert repository.get_by_code(21) is None
