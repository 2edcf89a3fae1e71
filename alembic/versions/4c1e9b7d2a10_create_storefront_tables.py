"""Create financing, product and order tables

Revision ID: 4c1e9b7d2a10
Revises:
Create Date: 2026-01-12 10:41:07.318254

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "4c1e9b7d2a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(precision=14, scale=2)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "financing_groups",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_financing_groups_key"), "financing_groups", ["key"], unique=True
    )

    op.create_table(
        "financing_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code", sa.Integer(), nullable=True),
        sa.Column("description", sa.String(length=200), nullable=False),
        sa.Column("months", sa.Integer(), nullable=False),
        sa.Column("surcharge_pct", sa.Numeric(precision=8, scale=6), nullable=False),
        sa.Column("group_key", sa.String(length=64), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("min_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("max_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column(
            "include_categories", postgresql.ARRAY(sa.String(length=100)), nullable=False
        ),
        sa.Column(
            "exclude_categories", postgresql.ARRAY(sa.String(length=100)), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_financing_plans_code"), "financing_plans", ["code"], unique=True)
    op.create_index(
        op.f("ix_financing_plans_group_key"), "financing_plans", ["group_key"], unique=False
    )

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("sales_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("subcategory", sa.String(length=100), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("financing_mode", sa.String(length=20), nullable=False),
        sa.Column("financing_group_key", sa.String(length=64), nullable=True),
        sa.Column("financing_down_pct", sa.Numeric(precision=5, scale=4), nullable=True),
        sa.Column(
            "financing_plan_ids", postgresql.ARRAY(sa.String(length=36)), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_products_category"), "products", ["category"], unique=False)

    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("customer_name", sa.String(length=200), nullable=False),
        sa.Column("customer_phone", sa.String(length=30), nullable=False),
        sa.Column("customer_email", sa.String(length=200), nullable=True),
        sa.Column("customer_doc_number", sa.String(length=30), nullable=True),
        sa.Column("items_sub_total", MONEY, nullable=False),
        sa.Column("surcharge_total", MONEY, nullable=False),
        sa.Column("discount_total", MONEY, nullable=False),
        sa.Column("shipping_total", MONEY, nullable=False),
        sa.Column("grand_total", MONEY, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_status"), "orders", ["status"], unique=False)
    op.create_index(op.f("ix_orders_customer_phone"), "orders", ["customer_phone"], unique=False)

    op.create_table(
        "order_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("product_title", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("subcategory", sa.String(length=100), nullable=True),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("sub_total", MONEY, nullable=False),
        sa.Column("grand_total", MONEY, nullable=False),
        sa.Column("financing_plan_ref", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("financing_mode_applied", sa.String(length=20), nullable=True),
        sa.Column("financing_group_key", sa.String(length=64), nullable=True),
        sa.Column("financing_plan_code", sa.Integer(), nullable=True),
        sa.Column("financing_months", sa.Integer(), nullable=True),
        sa.Column("financing_surcharge_pct", sa.Numeric(precision=8, scale=6), nullable=True),
        sa.Column("financing_down_pct", sa.Numeric(precision=5, scale=4), nullable=True),
        sa.Column("financing_down_amount", MONEY, nullable=True),
        sa.Column("financing_surcharge_amount", MONEY, nullable=True),
        sa.Column("financing_total_with_surcharge", MONEY, nullable=True),
        sa.Column("financing_installment_amount", MONEY, nullable=True),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_order_items_order_id"), "order_items", ["order_id"], unique=False)
    op.create_index(
        op.f("ix_order_items_product_id"), "order_items", ["product_id"], unique=False
    )

    op.create_table(
        "order_status_changes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("order_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(
            "at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("from_status", sa.String(length=20), nullable=True),
        sa.Column("to_status", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_order_status_changes_order_id"),
        "order_status_changes",
        ["order_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_order_status_changes_order_id"), table_name="order_status_changes")
    op.drop_table("order_status_changes")
    op.drop_index(op.f("ix_order_items_product_id"), table_name="order_items")
    op.drop_index(op.f("ix_order_items_order_id"), table_name="order_items")
    op.drop_table("order_items")
    op.drop_index(op.f("ix_orders_customer_phone"), table_name="orders")
    op.drop_index(op.f("ix_orders_status"), table_name="orders")
    op.drop_table("orders")
    op.drop_index(op.f("ix_products_category"), table_name="products")
    op.drop_table("products")
    op.drop_index(op.f("ix_financing_plans_group_key"), table_name="financing_plans")
    op.drop_index(op.f("ix_financing_plans_code"), table_name="financing_plans")
    op.drop_table("financing_plans")
    op.drop_index(op.f("ix_financing_groups_key"), table_name="financing_groups")
    op.drop_table("financing_groups")
