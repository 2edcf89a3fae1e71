"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
Settings are read from the environment on every call, so nothing here
is cached either.
"""

from __future__ import annotations

import hmac
from typing import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from storefront.adapters.postgres_financing_group_repository import (
    PostgresFinancingGroupRepository,
)
from storefront.adapters.postgres_financing_plan_repository import (
    PostgresFinancingPlanRepository,
)
from storefront.adapters.postgres_order_repository import PostgresOrderRepository
from storefront.adapters.postgres_product_repository import PostgresProductRepository
from storefront.domain.errors import UnauthorizedError
from storefront.infra import config
from storefront.infra.db.session import get_session
from storefront.use_cases.build_checkout_message import BuildCheckoutMessage
from storefront.use_cases.create_order import CreateOrder
from storefront.use_cases.delete_order import DeleteOrder
from storefront.use_cases.financing_groups import (
    CreateGroup,
    DeleteGroup,
    ListGroups,
    UpdateGroup,
)
from storefront.use_cases.financing_plans import (
    CreatePlan,
    DeletePlan,
    ListPlans,
    ListPublicPlans,
    UpdatePlan,
    UpsertPlans,
)
from storefront.use_cases.get_order_by_id import GetOrderById
from storefront.use_cases.list_orders import ListOrders
from storefront.use_cases.quote_financing import QuoteFinancing
from storefront.use_cases.quote_product_financing import QuoteProductFinancing
from storefront.use_cases.update_order import UpdateOrder


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    FastAPI will:
    1. Call this function when a request starts
    2. Inject the session into the route
    3. Commit/rollback and close the session when the request ends

    Everything one request writes (an order with all its items, a bulk
    import) is committed together or rolled back together.

    Yields:
        Session: SQLAlchemy database session (per-request)
    """
    with get_session() as session:
        yield session


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """
    Guard for admin routes: the X-Admin-Token header must match ADMIN_API_TOKEN.

    With no token configured every admin call is rejected.

    Raises:
        UnauthorizedError: If the header is missing or wrong
    """
    expected = config.admin_api_token()
    if not expected or not x_admin_token:
        raise UnauthorizedError("Admin token required")
    if not hmac.compare_digest(x_admin_token.encode(), expected.encode()):
        raise UnauthorizedError("Invalid admin token")


# ==============================================================================
# Quotes
# ==============================================================================


def get_quote_financing_use_case(db: Session = Depends(get_db)) -> QuoteFinancing:
    """
    Factory function that returns a configured QuoteFinancing use case.

    This function is called per-request, ensuring each request gets:
    - Fresh repository instance
    - Fresh use case instance
    - Isolated database session
    """
    return QuoteFinancing(
        plan_repository=PostgresFinancingPlanRepository(session=db),
        group_repository=PostgresFinancingGroupRepository(session=db),
    )


def get_quote_product_financing_use_case(
    db: Session = Depends(get_db),
) -> QuoteProductFinancing:
    return QuoteProductFinancing(
        product_repository=PostgresProductRepository(session=db),
        plan_repository=PostgresFinancingPlanRepository(session=db),
        default_down_pct=config.default_down_pct(),
        group_repository=PostgresFinancingGroupRepository(session=db),
    )


def get_list_public_plans_use_case(db: Session = Depends(get_db)) -> ListPublicPlans:
    return ListPublicPlans(
        plan_repository=PostgresFinancingPlanRepository(session=db),
        default_down_pct=config.default_down_pct(),
        group_repository=PostgresFinancingGroupRepository(session=db),
    )


# ==============================================================================
# Plan administration
# ==============================================================================


def get_list_plans_use_case(db: Session = Depends(get_db)) -> ListPlans:
    return ListPlans(plan_repository=PostgresFinancingPlanRepository(session=db))


def get_create_plan_use_case(db: Session = Depends(get_db)) -> CreatePlan:
    return CreatePlan(plan_repository=PostgresFinancingPlanRepository(session=db))


def get_update_plan_use_case(db: Session = Depends(get_db)) -> UpdatePlan:
    return UpdatePlan(plan_repository=PostgresFinancingPlanRepository(session=db))


def get_delete_plan_use_case(db: Session = Depends(get_db)) -> DeletePlan:
    return DeletePlan(plan_repository=PostgresFinancingPlanRepository(session=db))


def get_upsert_plans_use_case(db: Session = Depends(get_db)) -> UpsertPlans:
    return UpsertPlans(plan_repository=PostgresFinancingPlanRepository(session=db))


# ==============================================================================
# Group administration
# ==============================================================================


def get_list_groups_use_case(db: Session = Depends(get_db)) -> ListGroups:
    return ListGroups(group_repository=PostgresFinancingGroupRepository(session=db))


def get_create_group_use_case(db: Session = Depends(get_db)) -> CreateGroup:
    return CreateGroup(group_repository=PostgresFinancingGroupRepository(session=db))


def get_update_group_use_case(db: Session = Depends(get_db)) -> UpdateGroup:
    return UpdateGroup(group_repository=PostgresFinancingGroupRepository(session=db))


def get_delete_group_use_case(db: Session = Depends(get_db)) -> DeleteGroup:
    return DeleteGroup(group_repository=PostgresFinancingGroupRepository(session=db))


# ==============================================================================
# Orders
# ==============================================================================


def get_create_order_use_case(db: Session = Depends(get_db)) -> CreateOrder:
    """
    Factory for CreateOrder.

    Every repository shares the request session, so the single
    order write and every read that led to it belong to one transaction.
    """
    return CreateOrder(
        order_repository=PostgresOrderRepository(session=db),
        product_repository=PostgresProductRepository(session=db),
        plan_repository=PostgresFinancingPlanRepository(session=db),
        default_down_pct=config.default_down_pct(),
        group_repository=PostgresFinancingGroupRepository(session=db),
    )


def get_get_order_by_id_use_case(db: Session = Depends(get_db)) -> GetOrderById:
    return GetOrderById(order_repository=PostgresOrderRepository(session=db))


def get_list_orders_use_case(db: Session = Depends(get_db)) -> ListOrders:
    return ListOrders(order_repository=PostgresOrderRepository(session=db))


def get_update_order_use_case(db: Session = Depends(get_db)) -> UpdateOrder:
    return UpdateOrder(order_repository=PostgresOrderRepository(session=db))


def get_delete_order_use_case(db: Session = Depends(get_db)) -> DeleteOrder:
    return DeleteOrder(order_repository=PostgresOrderRepository(session=db))


# ==============================================================================
# Checkout
# ==============================================================================


def get_build_checkout_message_use_case() -> BuildCheckoutMessage:
    return BuildCheckoutMessage(
        shop_phone=config.shop_whatsapp_phone(),
        shipping_flat=config.shipping_flat(),
    )
