from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from storefront.infra.db.models.base import Base, TimestampMixin


class FinancingPlanRow(TimestampMixin, Base):
    __tablename__ = "financing_plans"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    code: Mapped[int | None] = mapped_column(Integer, nullable=True, unique=True, index=True)
    description: Mapped[str] = mapped_column(String(200), nullable=False)

    months: Mapped[int] = mapped_column(Integer, nullable=False)
    surcharge_pct: Mapped[Decimal] = mapped_column(
        Numeric(precision=8, scale=6), nullable=False
    )  # 0.9455 = 94.55%

    group_key: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True, default="default"
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    min_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    max_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    include_categories: Mapped[list[str]] = mapped_column(
        ARRAY(String(100)), nullable=False, default=list
    )
    exclude_categories: Mapped[list[str]] = mapped_column(
        ARRAY(String(100)), nullable=False, default=list
    )


class FinancingGroupRow(TimestampMixin, Base):
    __tablename__ = "financing_groups"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
