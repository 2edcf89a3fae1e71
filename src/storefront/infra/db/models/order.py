from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infra.db.models.base import Base, TimestampMixin

MONEY = Numeric(precision=14, scale=2)


class OrderRow(TimestampMixin, Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="en_proceso", index=True
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ARS")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    customer_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    customer_doc_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    items_sub_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    surcharge_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    discount_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    shipping_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    grand_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    items: Mapped[list[OrderItemRow]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemRow.position",
        lazy="selectin",
    )
    status_history: Mapped[list[OrderStatusChangeRow]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusChangeRow.position",
        lazy="selectin",
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Product snapshot (no FK: the product may be removed later)
    product_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    product_title: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)

    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    sub_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Financing snapshot, frozen at sale time. financing_mode_applied is
    # NULL when the line was paid cash. plan_ref has no FK: plans are hard
    # deleted and the snapshot must survive that.
    financing_plan_ref: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True
    )
    financing_mode_applied: Mapped[str | None] = mapped_column(String(20), nullable=True)
    financing_group_key: Mapped[str | None] = mapped_column(String(64), nullable=True)
    financing_plan_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    financing_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    financing_surcharge_pct: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=8, scale=6), nullable=True
    )
    financing_down_pct: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=5, scale=4), nullable=True
    )
    financing_down_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    financing_surcharge_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    financing_total_with_surcharge: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    financing_installment_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)

    order: Mapped[OrderRow] = relationship(back_populates="items")


class OrderStatusChangeRow(Base):
    __tablename__ = "order_status_changes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    order: Mapped[OrderRow] = relationship(back_populates="status_history")
