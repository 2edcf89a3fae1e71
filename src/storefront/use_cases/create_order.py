"""Create order use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from storefront.domain.eligibility import is_eligible, resolve_product_selection
from storefront.domain.errors import PlanNotFoundError, ProductNotFoundError, ValidationError
from storefront.domain.financing import DEFAULT_DOWN_PCT, FinancingPlan
from storefront.domain.order import (
    Currency,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    OrderTotals,
    StatusChange,
    normalize_phone,
)
from storefront.domain.order_snapshot import build_financing_snapshot
from storefront.domain.product import Product
from storefront.ports.financing_group_repository import FinancingGroupRepository
from storefront.ports.financing_plan_repository import FinancingPlanRepository
from storefront.ports.order_repository import OrderRepository
from storefront.ports.product_repository import ProductRepository
from storefront.use_cases.quote_financing import known_group_keys

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class FinancingChoice:
    """Plan picked for a line: by id (preferred) or by legacy numeric code."""

    plan_id: str | None = None
    code: int | None = None


@dataclass(frozen=True, slots=True)
class CreateOrderItem:
    product_id: str
    quantity: int = 1
    financing: FinancingChoice | None = None


@dataclass(frozen=True, slots=True)
class CreateOrderRequest:
    customer: Customer
    items: tuple[CreateOrderItem, ...]
    notes: str | None = None
    currency: Currency = Currency.ARS
    discount_total: Decimal = ZERO
    shipping_total: Decimal = ZERO

    def validate(self) -> None:
        """
        Structural checks done before touching any repository.

        Raises:
            ValidationError: With one entry per offending field
        """
        errors: list[dict[str, str]] = []

        try:
            self.customer.validate()
        except ValidationError as exc:
            errors.extend(exc.errors or [])

        if not self.items:
            errors.append(
                {"field": "items", "message": "Must contain at least one item", "code": "REQUIRED"}
            )

        for index, item in enumerate(self.items):
            if item.quantity < 1:
                errors.append(
                    {
                        "field": f"items.{index}.quantity",
                        "message": "Must be >= 1",
                        "code": "INVALID_VALUE",
                    }
                )
            choice = item.financing
            if choice is not None and not choice.plan_id and choice.code is None:
                errors.append(
                    {
                        "field": f"items.{index}.financing",
                        "message": "Must reference a plan by planId or code",
                        "code": "REQUIRED",
                    }
                )

        for name, amount in (
            ("discount_total", self.discount_total),
            ("shipping_total", self.shipping_total),
        ):
            if not amount.is_finite() or amount < 0:
                errors.append({"field": name, "message": "Must be >= 0", "code": "INVALID_VALUE"})

        if errors:
            raise ValidationError(errors=errors)


class CreateOrder:
    """
    Place an order and freeze the financing terms of each line.

    Steps:
    1. Validate the request shape
    2. Build every line in request order: load the product, resolve the
       chosen plan fresh from the repository, check it is allowed for the
       product, and compute the snapshot against the line subtotal
    3. Total the order and write it once

    Any failure in step 2 aborts the whole call before anything is
    written. Client-supplied totals are never trusted, and the fallback
    quote table is never consulted here.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        plan_repository: FinancingPlanRepository,
        default_down_pct: Decimal = DEFAULT_DOWN_PCT,
        group_repository: FinancingGroupRepository | None = None,
    ) -> None:
        self._order_repository = order_repository
        self._product_repository = product_repository
        self._plan_repository = plan_repository
        self._default_down_pct = default_down_pct
        self._group_repository = group_repository

    def execute(self, request: CreateOrderRequest) -> Order:
        """
        Raises:
            ValidationError: Malformed request, or a plan not allowed for its product
            ProductNotFoundError: If an item references an unknown product
            PlanNotFoundError: If an item references an unknown plan id or code
            RepositoryUnavailableError: If storage cannot be reached
        """
        customer = replace(request.customer, phone=normalize_phone(request.customer.phone))
        request = replace(request, customer=customer)
        request.validate()

        items = [
            self._build_item(index, item) for index, item in enumerate(request.items)
        ]

        items_sub_total = sum((item.sub_total for item in items), ZERO)
        surcharge_total = sum(
            (item.financing.surcharge_amount for item in items if item.financing), ZERO
        )
        totals = OrderTotals(
            items_sub_total=items_sub_total,
            surcharge_total=surcharge_total,
            discount_total=request.discount_total,
            shipping_total=request.shipping_total,
            grand_total=items_sub_total
            + surcharge_total
            - request.discount_total
            + request.shipping_total,
        )

        order = self._order_repository.create(
            Order(
                customer=customer,
                items=tuple(items),
                totals=totals,
                status=OrderStatus.EN_PROCESO,
                currency=request.currency,
                notes=request.notes,
                status_history=(
                    StatusChange(at=datetime.now(timezone.utc), to_status=OrderStatus.EN_PROCESO),
                ),
            )
        )

        logger.info(
            "Order created",
            extra={
                "order_id": order.id,
                "items": len(order.items),
                "financed_items": sum(1 for item in order.items if item.financing),
                "grand_total": str(order.totals.grand_total),
            },
        )
        return order

    def _build_item(self, index: int, item: CreateOrderItem) -> OrderItem:
        product = self._product_repository.get_by_id(item.product_id)
        if product is None:
            raise ProductNotFoundError(item.product_id, field=f"items.{index}.product_id")

        unit_price = product.unit_price
        sub_total = unit_price * item.quantity

        if item.financing is None:
            return OrderItem(
                product_id=product.id,
                product_title=product.title,
                category=product.category,
                subcategory=product.subcategory,
                unit_price=unit_price,
                quantity=item.quantity,
                sub_total=sub_total,
                grand_total=sub_total,
            )

        selection = resolve_product_selection(product.financing, self._default_down_pct)
        if not selection.offered:
            raise ValidationError(
                errors=[
                    {
                        "field": f"items.{index}.financing",
                        "message": "Financing is not available for this product",
                        "code": "FINANCING_NOT_OFFERED",
                    }
                ]
            )

        plan = self._resolve_plan(index, item.financing)
        if not is_eligible(
            plan,
            price=unit_price,
            plan_ids=selection.plan_ids,
            group_key=selection.group_key,
            category=product.category,
            known_group_keys=known_group_keys(
                self._group_repository, selection.group_key, selection.plan_ids
            ),
        ):
            raise ValidationError(
                errors=[
                    {
                        "field": f"items.{index}.financing",
                        "message": "Plan is not available for this product",
                        "code": "PLAN_NOT_ELIGIBLE",
                    }
                ]
            )

        snapshot = build_financing_snapshot(
            plan,
            selection,
            sub_total,
            group_key=self._snapshot_group_key(plan, product, selection.group_key),
        )
        return OrderItem(
            product_id=product.id,
            product_title=product.title,
            category=product.category,
            subcategory=product.subcategory,
            unit_price=unit_price,
            quantity=item.quantity,
            sub_total=sub_total,
            grand_total=sub_total + snapshot.surcharge_amount,
            financing=snapshot,
        )

    def _resolve_plan(self, index: int, choice: FinancingChoice) -> FinancingPlan:
        # Both lookup paths end at the same repository record
        if choice.plan_id:
            plan = self._plan_repository.get_by_id(choice.plan_id)
            if plan is None:
                raise PlanNotFoundError(choice.plan_id, field=f"items.{index}.financing.plan_id")
            return plan

        plan = self._plan_repository.get_by_code(choice.code)  # type: ignore[arg-type]
        if plan is None:
            raise PlanNotFoundError(str(choice.code), field=f"items.{index}.financing.code")
        return plan

    @staticmethod
    def _snapshot_group_key(
        plan: FinancingPlan, product: Product, selected_group: str | None
    ) -> str | None:
        if selected_group:
            return selected_group
        if product.financing is not None and product.financing.group_key:
            return product.financing.group_key
        return plan.group_key
