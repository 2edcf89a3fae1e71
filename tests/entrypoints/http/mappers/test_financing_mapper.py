"""
Test suite for FinancingMapper.

Verifies the translation between REST DTOs and domain models:
- Query strings become a domain QuoteRequest (str → Decimal)
- Plan payloads become FinancingPlan (pipe-separated categories accepted)
- Bulk rows are parsed one by one; bad rows are rejected, not fatal
- Domain values are rendered back as decimal strings
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.domain.errors import ValidationError
from storefront.domain.financing import FinancingPlan, Quote, QuoteItem, QuoteRequest
from storefront.entrypoints.http.dtos.financing import FinancingPlanPayloadDTO
from storefront.entrypoints.http.mappers.financing_mapper import FinancingMapper
from storefront.use_cases.financing_plans import RejectedRow, UpsertPlansResponse


# ==============================================================================
# to_quote_request() - query params → QuoteRequest
# ==============================================================================


def test_to_quote_request_parses_decimals() -> None:
    result = FinancingMapper.to_quote_request(price="100000", down_pct="0.25")

    assert isinstance(result, QuoteRequest)
    assert result.price == Decimal("100000")
    assert result.down_pct == Decimal("0.25")


def test_to_quote_request_defaults_down_pct() -> None:
    result = FinancingMapper.to_quote_request(price="100000")

    assert result.down_pct == Decimal("0.15")


def test_to_quote_request_splits_plan_ids() -> None:
    result = FinancingMapper.to_quote_request(price="1", plan_ids=" p3, ,p6 ,")

    assert result.plan_ids == ("p3", "p6")


def test_to_quote_request_blank_filters_become_none() -> None:
    result = FinancingMapper.to_quote_request(price="1", group_key="", category="")

    assert result.plan_ids == ()
    assert result.group_key is None
    assert result.category is None


def test_to_quote_request_keeps_nan_for_the_engine() -> None:
    result = FinancingMapper.to_quote_request(price="NaN")

    assert result.price.is_nan()


def test_to_quote_request_collects_every_decimal_error() -> None:
    with pytest.raises(ValidationError) as exc_info:
        FinancingMapper.to_quote_request(price="abc", down_pct="x")

    assert [error["field"] for error in exc_info.value.errors] == ["price", "downPct"]
    assert {error["code"] for error in exc_info.value.errors} == {"INVALID_DECIMAL"}


# ==============================================================================
# to_quote_response() - Quote → DTO
# ==============================================================================


def test_to_quote_response_renders_strings() -> None:
    quote = Quote(
        price=Decimal("100000"),
        down_pct=Decimal("0.15"),
        items=(
            QuoteItem(
                plan_id=None,
                code=2,
                description="6 CUOTAS",
                months=6,
                surcharge_pct=Decimal("0.30"),
                down_pct=Decimal("0.15"),
                down_amount=Decimal("15000.00"),
                balance=Decimal("85000.00"),
                surcharge_amount=Decimal("25500.00"),
                total=Decimal("110500.00"),
                monthly=Decimal("18416.67"),
            ),
        ),
    )

    result = FinancingMapper.to_quote_response(quote)

    assert result.price == "100000"
    assert result.down_pct == "0.15"
    assert result.items[0].plan_id is None
    assert result.items[0].monthly == "18416.67"
    assert result.model_dump(by_alias=True)["items"][0]["surchargeAmount"] == "25500.00"


# ==============================================================================
# to_domain_plan() / to_plan_dto()
# ==============================================================================


def test_to_domain_plan_accepts_pipe_separated_categories() -> None:
    dto = FinancingPlanPayloadDTO(
        code=5,
        description=" 6 CUOTAS S/I ",
        months=6,
        surcharge_pct="0",
        include_categories="celulares| tablets |",
        exclude_categories=["bicicletas"],
        min_price="50000",
    )

    plan = FinancingMapper.to_domain_plan(dto, plan_id="p6si")

    assert plan.id == "p6si"
    assert plan.description == "6 CUOTAS S/I"
    assert plan.surcharge_pct == Decimal("0")
    assert plan.group_key == "default"
    assert plan.min_price == Decimal("50000")
    assert plan.max_price is None
    assert plan.include_categories == ("celulares", "tablets")
    assert plan.exclude_categories == ("bicicletas",)


def test_to_domain_plan_blank_group_means_ungrouped() -> None:
    dto = FinancingPlanPayloadDTO(
        description="3 CUOTAS", months=3, surcharge_pct="0.3", group_key=""
    )

    assert FinancingMapper.to_domain_plan(dto).group_key is None


def test_to_plan_dto_round_trips_optional_prices() -> None:
    plan = FinancingPlan(
        id="p3",
        code=1,
        description="3 CUOTAS",
        months=3,
        surcharge_pct=Decimal("0.30"),
        max_price=Decimal("900000"),
    )

    result = FinancingMapper.to_plan_dto(plan).model_dump(by_alias=True)

    assert result["surchargePct"] == "0.30"
    assert result["minPrice"] is None
    assert result["maxPrice"] == "900000"
    assert result["includeCategories"] == []


# ==============================================================================
# to_upsert_request() / to_upsert_response() - bulk rows
# ==============================================================================


def test_to_upsert_request_keeps_positions_and_rejects_bad_rows() -> None:
    rows = [
        {"code": 1, "description": "3 CUOTAS", "months": 3, "surchargePct": "0.30"},
        {"code": 2, "description": "6 CUOTAS", "months": 0, "surchargePct": "0.30"},
        "not an object",
        {"code": 5, "description": "6 CUOTAS S/I", "months": 6, "surchargePct": "0"},
    ]

    result = FinancingMapper.to_upsert_request(rows)

    assert [index for index, _ in result.rows] == [0, 3]
    assert [plan.code for _, plan in result.rows] == [1, 5]
    assert [row.index for row in result.rejected] == [1, 2]
    assert result.rejected[0].errors[0]["field"] == "months"
    assert result.rejected[0].errors[0]["code"] == "greater_than_equal"


def test_to_upsert_response() -> None:
    response = UpsertPlansResponse(
        count=3,
        rejected=[
            RejectedRow(
                index=4,
                errors=[{"field": "months", "message": "Must be >= 1", "code": "INVALID_RANGE"}],
            )
        ],
    )

    result = FinancingMapper.to_upsert_response(response)

    assert result.count == 3
    assert result.rejected[0].index == 4
    assert result.rejected[0].errors[0].code == "INVALID_RANGE"
