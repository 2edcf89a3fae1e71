from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from storefront.domain.errors import ValidationError
from storefront.domain.financing import FinancingMode


# ==============================================================================
# Status machine
# ==============================================================================


class OrderStatus(str, Enum):
    EN_PROCESO = "en_proceso"
    VENDIDO = "vendido"
    CANCELADO = "cancelado"


# Admins may correct any status into any other one; kept as an explicit
# table so tightening a transition is a one-line change.
ORDER_STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.EN_PROCESO: frozenset({OrderStatus.VENDIDO, OrderStatus.CANCELADO}),
    OrderStatus.VENDIDO: frozenset({OrderStatus.EN_PROCESO, OrderStatus.CANCELADO}),
    OrderStatus.CANCELADO: frozenset({OrderStatus.EN_PROCESO, OrderStatus.VENDIDO}),
}


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in ORDER_STATUS_TRANSITIONS[from_status]


class Currency(str, Enum):
    ARS = "ARS"
    USD = "USD"


# ==============================================================================
# Value objects
# ==============================================================================


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_phone(raw: str | None) -> str:
    """Keep digits only: "+54 9 381-123-4567" -> "5493811234567"."""
    return re.sub(r"\D", "", raw or "")


@dataclass(frozen=True, slots=True)
class Customer:
    name: str
    phone: str
    email: str | None = None
    doc_number: str | None = None

    def validate(self) -> None:
        errors: list[dict[str, str]] = []

        if not self.name or not self.name.strip():
            errors.append(
                {"field": "customer.name", "message": "Must not be empty", "code": "REQUIRED"}
            )
        if len(self.phone or "") < 5:
            errors.append(
                {
                    "field": "customer.phone",
                    "message": "Must have at least 5 characters",
                    "code": "INVALID_PHONE",
                }
            )
        if self.email and not _EMAIL_PATTERN.match(self.email):
            errors.append(
                {
                    "field": "customer.email",
                    "message": "Must be a valid email address",
                    "code": "INVALID_EMAIL",
                }
            )

        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True, slots=True)
class OrderItemFinancingSnapshot:
    """
    Financing terms frozen on an order item at sale time.

    Never recomputed from the live plan: the plan may be edited or
    deleted later (plan_ref then dangles or becomes None).
    """

    mode_applied: FinancingMode
    months: int
    surcharge_pct: Decimal
    down_pct: Decimal
    down_amount: Decimal
    surcharge_amount: Decimal
    total_with_surcharge: Decimal
    installment_amount: Decimal
    plan_ref: str | None = None
    group_key: str | None = None
    plan_code: int | None = None


@dataclass(frozen=True, slots=True)
class OrderItem:
    product_id: str
    product_title: str
    category: str
    unit_price: Decimal
    quantity: int
    sub_total: Decimal
    grand_total: Decimal
    subcategory: str | None = None
    financing: OrderItemFinancingSnapshot | None = None


@dataclass(frozen=True, slots=True)
class OrderTotals:
    items_sub_total: Decimal
    surcharge_total: Decimal
    discount_total: Decimal
    shipping_total: Decimal
    grand_total: Decimal


@dataclass(frozen=True, slots=True)
class StatusChange:
    at: datetime
    to_status: OrderStatus
    from_status: OrderStatus | None = None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class Order:
    customer: Customer
    items: tuple[OrderItem, ...]
    totals: OrderTotals
    id: str | None = None
    status: OrderStatus = OrderStatus.EN_PROCESO
    currency: Currency = Currency.ARS
    notes: str | None = None
    status_history: tuple[StatusChange, ...] = field(default_factory=tuple)
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ==============================================================================
# Queries
# ==============================================================================


ORDER_SORT_FIELDS = frozenset({"created_at", "updated_at", "status"})


@dataclass(frozen=True, slots=True)
class OrderFilters:
    phone_prefix: str | None = None
    status: OrderStatus | None = None
    day: date | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None

    def validate(self) -> None:
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationError(
                errors=[
                    {
                        "field": "date_from",
                        "message": "Must be less than or equal to date_to",
                        "code": "INVALID_RANGE",
                    }
                ]
            )


@dataclass(frozen=True, slots=True)
class OrderSort:
    field: str = "created_at"
    descending: bool = True

    @classmethod
    def parse(cls, raw: str | None) -> OrderSort:
        """'-created_at' sorts descending, 'created_at' ascending."""
        if not raw:
            return cls()
        descending = raw.startswith("-")
        return cls(field=raw.lstrip("-"), descending=descending)

    def validate(self) -> None:
        if self.field not in ORDER_SORT_FIELDS:
            raise ValidationError(
                errors=[
                    {
                        "field": "sort",
                        "message": f"Must be one of {sorted(ORDER_SORT_FIELDS)}",
                        "code": "INVALID_VALUE",
                    }
                ]
            )


@dataclass(frozen=True, slots=True)
class Paging:
    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def validate(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if self.page_size <= 0:
            raise ValidationError("page_size must be > 0")
        if self.page_size > 100:
            raise ValidationError("page_size must be <= 100")
