from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from storefront.domain.errors import ValidationError


DEFAULT_DOWN_PCT = Decimal("0.15")
DEFAULT_GROUP_KEY = "default"

# Storage limits: NUMERIC(12,2) money, NUMERIC(8,6) surcharge, VARCHAR(200) description
MAX_AMOUNT = Decimal("9999999999.99")
MAX_SURCHARGE_PCT = Decimal("99.999999")
MAX_DESCRIPTION_LENGTH = 200

_GROUP_KEY_PATTERN = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")


class FinancingMode(str, Enum):
    """How a product resolves its financing offer."""

    INHERIT = "inherit"
    OVERRIDE = "override"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class FinancingPlan:
    """A single installment offer.

    surcharge_pct is a fraction over the financed balance (0.30 = 30%).
    A plan is usable only while active.
    """

    description: str
    months: int
    surcharge_pct: Decimal
    id: str | None = None
    code: int | None = None
    group_key: str | None = DEFAULT_GROUP_KEY
    active: bool = True
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    include_categories: tuple[str, ...] = ()
    exclude_categories: tuple[str, ...] = ()

    def validate(self) -> None:
        """
        Validate plan invariants.

        Raises:
            ValidationError: With one entry per offending field
        """
        errors: list[dict[str, str]] = []

        if not self.description or not self.description.strip():
            errors.append(
                {"field": "description", "message": "Must not be empty", "code": "REQUIRED"}
            )
        elif len(self.description) > MAX_DESCRIPTION_LENGTH:
            errors.append(
                {
                    "field": "description",
                    "message": f"Must be at most {MAX_DESCRIPTION_LENGTH} characters",
                    "code": "INVALID_LENGTH",
                }
            )
        if self.months < 1:
            errors.append(
                {"field": "months", "message": "Must be >= 1", "code": "INVALID_VALUE"}
            )
        if not self.surcharge_pct.is_finite() or self.surcharge_pct < 0:
            errors.append(
                {"field": "surcharge_pct", "message": "Must be >= 0", "code": "INVALID_VALUE"}
            )
        elif self.surcharge_pct > MAX_SURCHARGE_PCT:
            errors.append(
                {
                    "field": "surcharge_pct",
                    "message": f"Must be <= {MAX_SURCHARGE_PCT}",
                    "code": "INVALID_RANGE",
                }
            )
        for name, amount in (("min_price", self.min_price), ("max_price", self.max_price)):
            if amount is None:
                continue
            if not amount.is_finite() or amount < 0:
                errors.append({"field": name, "message": "Must be >= 0", "code": "INVALID_VALUE"})
            elif amount > MAX_AMOUNT:
                errors.append(
                    {"field": name, "message": f"Must be <= {MAX_AMOUNT}", "code": "INVALID_RANGE"}
                )
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            errors.append(
                {
                    "field": "min_price",
                    "message": "Must be less than or equal to max_price",
                    "code": "INVALID_RANGE",
                }
            )

        if errors:
            raise ValidationError(errors=errors)

    @property
    def is_ungrouped(self) -> bool:
        return not self.group_key


@dataclass(frozen=True, slots=True)
class FinancingGroup:
    """A named bucket of plans, selectable at the product level."""

    key: str
    name: str
    id: str | None = None
    description: str | None = None
    sort_order: int = 0
    active: bool = True

    def validate(self) -> None:
        errors: list[dict[str, str]] = []

        if not _GROUP_KEY_PATTERN.match(self.key or ""):
            errors.append(
                {
                    "field": "key",
                    "message": "Must be a lowercase slug (letters, digits, '-' or '_')",
                    "code": "INVALID_SLUG",
                }
            )
        if not self.name or not self.name.strip():
            errors.append({"field": "name", "message": "Must not be empty", "code": "REQUIRED"})

        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True, slots=True)
class ProductFinancingConfig:
    """Per-product financing override embedded in the product record."""

    mode: FinancingMode = FinancingMode.INHERIT
    group_key: str | None = None
    down_pct: Decimal | None = None
    plan_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class QuoteRequest:
    price: Decimal
    down_pct: Decimal = DEFAULT_DOWN_PCT
    plan_ids: tuple[str, ...] = ()
    group_key: str | None = None
    category: str | None = None

    def validate(self) -> None:
        """
        Validate the price magnitude and the down payment range.

        Non-finite values are left to the quote engine, which treats them
        as "no eligible plan" instead of rejecting the call.

        Raises:
            ValidationError: If |price| exceeds MAX_AMOUNT or down_pct is outside [0, 1]
        """
        errors: list[dict[str, str]] = []

        if self.price.is_finite() and abs(self.price) > MAX_AMOUNT:
            errors.append(
                {
                    "field": "price",
                    "message": f"Must be between -{MAX_AMOUNT} and {MAX_AMOUNT}",
                    "code": "INVALID_RANGE",
                }
            )
        if self.down_pct.is_finite() and not (Decimal("0") <= self.down_pct <= Decimal("1")):
            errors.append(
                {
                    "field": "down_pct",
                    "message": "Must be between 0 and 1",
                    "code": "INVALID_RANGE",
                }
            )

        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True, slots=True)
class QuoteItem:
    """One computed installment option. Never persisted on its own."""

    description: str
    months: int
    surcharge_pct: Decimal
    down_pct: Decimal
    down_amount: Decimal
    balance: Decimal
    surcharge_amount: Decimal
    total: Decimal
    monthly: Decimal
    plan_id: str | None = None
    code: int | None = None


@dataclass(frozen=True, slots=True)
class Quote:
    price: Decimal
    down_pct: Decimal
    items: tuple[QuoteItem, ...] = field(default_factory=tuple)
    is_fallback: bool = False
