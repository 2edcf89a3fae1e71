"""PostgreSQL implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.adapters.sqlalchemy_errors import parse_uuid, translate_db_errors
from storefront.domain.financing import FinancingMode, ProductFinancingConfig
from storefront.domain.product import Product
from storefront.infra.db.models.product import ProductRow
from storefront.ports.product_repository import ProductRepository


class PostgresProductRepository(ProductRepository):
    """
    Read-only PostgreSQL access to products.

    Soft-deleted products are treated as missing.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, product_id: str) -> Product | None:
        uuid_ = parse_uuid(product_id)
        if uuid_ is None:
            return None

        query = select(ProductRow).where(
            ProductRow.id == uuid_,
            ProductRow.is_deleted.is_(False),
        )
        with translate_db_errors("products.get_by_id"):
            row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=str(row.id),
            title=row.title,
            price=row.price,
            sales_price=row.sales_price,
            category=row.category,
            subcategory=row.subcategory,
            stock=row.stock,
            financing=ProductFinancingConfig(
                mode=FinancingMode(row.financing_mode or FinancingMode.INHERIT.value),
                group_key=row.financing_group_key,
                down_pct=row.financing_down_pct,
                plan_ids=tuple(row.financing_plan_ids or ()),
            ),
        )
