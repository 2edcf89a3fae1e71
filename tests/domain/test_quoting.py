"""
Test suite for the financing quote engine.

Covers the installment formula, cent rounding, display ordering and the
best-offer-per-term reduction.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from storefront.domain.errors import ArithmeticGuardError
from storefront.domain.financing import FinancingPlan
from storefront.domain.quoting import (
    best_per_term,
    build_quote,
    compute_quote_item,
    sort_quote_items,
    split_down_payment,
    to_cents,
)


def make_plan(**overrides: object) -> FinancingPlan:
    values: dict[str, object] = {
        "description": "6 CUOTAS",
        "months": 6,
        "surcharge_pct": Decimal("0.30"),
    }
    values.update(overrides)
    return FinancingPlan(**values)  # type: ignore[arg-type]


# ==============================================================================
# Formula
# ==============================================================================


def test_quote_item_for_six_months_at_thirty_percent() -> None:
    """price=100000, downPct=0.15, 6 months at 30% → monthly 18416.67."""
    plan = make_plan(id="p1", code=2)

    item = compute_quote_item(plan, Decimal("100000"), Decimal("0.15"))

    assert item.down_amount == Decimal("15000.00")
    assert item.balance == Decimal("85000.00")
    assert item.surcharge_amount == Decimal("25500.00")
    assert item.total == Decimal("110500.00")
    assert item.monthly == Decimal("18416.67")
    assert item.plan_id == "p1"
    assert item.code == 2
    assert item.months == 6
    assert item.down_pct == Decimal("0.15")


def test_full_down_payment_yields_zero_installments() -> None:
    """downPct=1 leaves nothing to finance, without any division error."""
    plans = [
        make_plan(months=3, surcharge_pct=Decimal("0.30")),
        make_plan(months=12, surcharge_pct=Decimal("1.00"), description="12 CUOTAS"),
    ]

    items = build_quote(Decimal("80000"), Decimal("1.0"), plans)

    assert len(items) == 2
    for item in items:
        assert item.balance == Decimal("0")
        assert item.surcharge_amount == Decimal("0")
        assert item.total == Decimal("0")
        assert item.monthly == Decimal("0")


def test_zero_down_payment_finances_the_whole_price() -> None:
    item = compute_quote_item(make_plan(months=3), Decimal("90000"), Decimal("0"))

    assert item.down_amount == Decimal("0")
    assert item.balance == Decimal("90000")
    assert item.total == Decimal("117000")
    assert item.monthly == Decimal("39000")


def test_balance_never_goes_negative() -> None:
    """A negative price clamps the financed balance at zero."""
    down_amount, balance = split_down_payment(Decimal("-100"), Decimal("0.15"))

    assert down_amount == Decimal("-15.00")
    assert balance == Decimal("0")


def test_monthly_times_months_matches_total_within_rounding() -> None:
    item = compute_quote_item(make_plan(months=7), Decimal("99999.99"), Decimal("0.15"))

    assert abs(item.monthly * 7 - item.total) <= Decimal("0.035")


def test_amount_beyond_decimal_precision_is_guarded() -> None:
    """Quantizing 5E+29 to cents needs more digits than the context holds."""
    with pytest.raises(ArithmeticGuardError) as exc_info:
        compute_quote_item(make_plan(id="p1"), Decimal("1E+30"), Decimal("0.5"))

    assert exc_info.value.context["field"] == "price"
    assert exc_info.value.context["plan_id"] == "p1"


@pytest.mark.parametrize(
    ("price", "down_pct", "months", "surcharge_pct"),
    [
        (Decimal("100000"), Decimal("0.15"), 6, Decimal("0.30")),
        (Decimal("99999.99"), Decimal("0"), 7, Decimal("0.4501")),
        (Decimal("1234.56"), Decimal("0.333333"), 11, Decimal("1.80")),
        (Decimal("0.01"), Decimal("0.5"), 3, Decimal("0")),
        (Decimal("9999999999.99"), Decimal("0.01"), 48, Decimal("2.5")),
        (Decimal("501"), Decimal("0.2"), 13, Decimal("0.07")),
    ],
)
def test_installments_add_up_to_the_total(
    price: Decimal, down_pct: Decimal, months: int, surcharge_pct: Decimal
) -> None:
    """Each rounded installment is off by at most half a cent from its exact share."""
    item = compute_quote_item(
        make_plan(months=months, surcharge_pct=surcharge_pct), price, down_pct
    )

    assert abs(item.monthly * item.months - item.total) <= Decimal("0.005") * (item.months + 1)
    assert abs(item.balance + item.surcharge_amount - item.total) <= Decimal("0.01")
    assert item.total >= item.balance


def test_build_quote_is_idempotent() -> None:
    plans = [
        make_plan(id="a", code=1, months=3, surcharge_pct=Decimal("0.20")),
        make_plan(id="b", code=2, months=12, surcharge_pct=Decimal("0.95")),
        make_plan(id="c", code=3, months=3, surcharge_pct=Decimal("0.10")),
    ]

    first = build_quote(Decimal("73450.10"), Decimal("0.15"), plans)
    second = build_quote(Decimal("73450.10"), Decimal("0.15"), plans)

    assert first == second
    assert [item.plan_id for item in first] == ["c", "a", "b"]


def test_to_cents_rounds_half_up() -> None:
    assert to_cents(Decimal("0.005")) == Decimal("0.01")
    assert to_cents(Decimal("18416.665")) == Decimal("18416.67")
    assert to_cents(Decimal("2.344")) == Decimal("2.34")


def test_compute_rejects_months_below_one() -> None:
    with pytest.raises(ArithmeticGuardError) as exc_info:
        compute_quote_item(make_plan(months=0), Decimal("1000"), Decimal("0.15"))

    assert exc_info.value.context["field"] == "months"


@pytest.mark.parametrize(
    ("price", "down_pct"),
    [
        (Decimal("NaN"), Decimal("0.15")),
        (Decimal("Infinity"), Decimal("0.15")),
        (Decimal("1000"), Decimal("NaN")),
    ],
)
def test_non_finite_inputs_are_guarded(price: Decimal, down_pct: Decimal) -> None:
    with pytest.raises(ArithmeticGuardError):
        build_quote(price, down_pct, [make_plan()])


# ==============================================================================
# build_quote
# ==============================================================================


def test_build_quote_skips_inactive_plans() -> None:
    plans = [make_plan(code=1), make_plan(code=2, active=False)]

    items = build_quote(Decimal("1000"), Decimal("0.15"), plans)

    assert [item.code for item in items] == [1]


def test_build_quote_skips_plans_with_invalid_term() -> None:
    """A misconfigured plan is skipped instead of failing the whole quote."""
    plans = [make_plan(code=1, months=0), make_plan(code=2, months=3)]

    items = build_quote(Decimal("1000"), Decimal("0.15"), plans)

    assert [item.code for item in items] == [2]


def test_build_quote_with_no_plans_is_empty() -> None:
    assert build_quote(Decimal("1000"), Decimal("0.15"), []) == []


def test_build_quote_orders_by_months_then_surcharge() -> None:
    plans = [
        make_plan(code=3, months=12, surcharge_pct=Decimal("1.00")),
        make_plan(code=2, months=6, surcharge_pct=Decimal("0.50")),
        make_plan(code=5, months=6, surcharge_pct=Decimal("0")),
        make_plan(code=1, months=3, surcharge_pct=Decimal("0.30")),
    ]

    items = build_quote(Decimal("1000"), Decimal("0.15"), plans)

    assert [(item.months, item.code) for item in items] == [(3, 1), (6, 5), (6, 2), (12, 3)]


def test_sort_is_deterministic_on_full_ties() -> None:
    """Same months and surcharge fall back to code, then description."""
    a = compute_quote_item(make_plan(code=None, description="B"), Decimal("100"), Decimal("0"))
    b = compute_quote_item(make_plan(code=None, description="A"), Decimal("100"), Decimal("0"))
    c = compute_quote_item(make_plan(code=7, description="A"), Decimal("100"), Decimal("0"))

    ordered = sort_quote_items([c, a, b])

    assert [(item.code, item.description) for item in ordered] == [
        (None, "A"),
        (None, "B"),
        (7, "A"),
    ]


# ==============================================================================
# best_per_term
# ==============================================================================


def test_best_per_term_keeps_cheapest_plan_for_same_months() -> None:
    """price=50000: 6 months at 30% and 6 months at 0% → only the 0% plan survives."""
    plans = [
        make_plan(code=2, surcharge_pct=Decimal("0.30")),
        make_plan(code=5, surcharge_pct=Decimal("0.0"), description="6 CUOTAS S/I"),
    ]
    items = build_quote(Decimal("50000"), Decimal("0.15"), plans)

    best = best_per_term(items)

    assert len(best) == 1
    assert best[0].code == 5
    assert best[0].surcharge_amount == Decimal("0")


def test_best_per_term_keeps_one_item_per_distinct_term() -> None:
    plans = [
        make_plan(code=1, months=3),
        make_plan(code=2, months=6, surcharge_pct=Decimal("0.50")),
        make_plan(code=5, months=6, surcharge_pct=Decimal("0")),
        make_plan(code=3, months=12, surcharge_pct=Decimal("1.00")),
        make_plan(code=10, months=12, surcharge_pct=Decimal("0.50")),
    ]

    best = best_per_term(build_quote(Decimal("1000"), Decimal("0.15"), plans))

    assert [(item.months, item.code) for item in best] == [(3, 1), (6, 5), (12, 10)]


def test_best_per_term_accepts_unsorted_input() -> None:
    expensive = compute_quote_item(make_plan(code=2), Decimal("100"), Decimal("0"))
    cheap = compute_quote_item(
        make_plan(code=5, surcharge_pct=Decimal("0")), Decimal("100"), Decimal("0")
    )

    assert [item.code for item in best_per_term([expensive, cheap])] == [5]
