"""PostgreSQL implementation of OrderRepository."""

from __future__ import annotations

import uuid
from datetime import datetime, time, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.adapters.sqlalchemy_errors import parse_uuid, translate_db_errors
from storefront.domain.financing import FinancingMode
from storefront.domain.order import (
    Currency,
    Customer,
    Order,
    OrderFilters,
    OrderItem,
    OrderItemFinancingSnapshot,
    OrderSort,
    OrderStatus,
    OrderTotals,
    Paging,
    StatusChange,
)
from storefront.infra.db.models.order import OrderItemRow, OrderRow, OrderStatusChangeRow
from storefront.ports.order_repository import OrderRepository, OrderSearchResult

if TYPE_CHECKING:
    from sqlalchemy.sql import Select


class PostgresOrderRepository(OrderRepository):
    """
    PostgreSQL implementation of OrderRepository.

    - create() adds the order, its items and first history entry in one flush
    - update() touches header fields and appends history; items are never rewritten
    - search() runs COUNT(*) before applying OFFSET/LIMIT
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, order: Order) -> Order:
        row = OrderRow(id=uuid.uuid4())
        self._apply_header(row, order)
        row.items_sub_total = order.totals.items_sub_total
        row.surcharge_total = order.totals.surcharge_total
        row.discount_total = order.totals.discount_total
        row.shipping_total = order.totals.shipping_total
        row.grand_total = order.totals.grand_total
        row.items = [self._item_row(position, item) for position, item in enumerate(order.items)]
        row.status_history = [
            self._status_change_row(position, change)
            for position, change in enumerate(order.status_history)
        ]

        with translate_db_errors("orders.create"):
            self._session.add(row)
            self._session.flush()
            self._session.refresh(row)
        return self._to_domain(row)

    def get_by_id(self, order_id: str) -> Order | None:
        row = self._get_row(order_id)
        return self._to_domain(row) if row else None

    def update(self, order: Order) -> Order | None:
        row = self._get_row(order.id or "")
        if row is None:
            return None

        self._apply_header(row, order)
        known = len(row.status_history)
        for position, change in enumerate(order.status_history[known:], start=known):
            row.status_history.append(self._status_change_row(position, change))

        with translate_db_errors("orders.update"):
            self._session.flush()
            self._session.refresh(row)
        return self._to_domain(row)

    def delete(self, order_id: str) -> bool:
        row = self._get_row(order_id)
        if row is None:
            return False

        with translate_db_errors("orders.delete"):
            self._session.delete(row)
            self._session.flush()
        return True

    def search(self, filters: OrderFilters, sort: OrderSort, paging: Paging) -> OrderSearchResult:
        query = self._build_query(filters)

        with translate_db_errors("orders.search"):
            count_query = select(func.count()).select_from(query.subquery())
            total_count = self._session.execute(count_query).scalar() or 0

            column = getattr(OrderRow, sort.field)
            query = query.order_by(column.desc() if sort.descending else column.asc())
            query = query.offset(paging.offset).limit(paging.page_size)
            rows = self._session.execute(query).scalars().all()

        return OrderSearchResult(
            orders=[self._to_domain(row) for row in rows],
            total_count=total_count,
        )

    def _get_row(self, order_id: str) -> OrderRow | None:
        uuid_ = parse_uuid(order_id)
        if uuid_ is None:
            return None
        with translate_db_errors("orders.get_by_id"):
            return self._session.get(OrderRow, uuid_)

    def _build_query(self, filters: OrderFilters) -> Select[tuple[OrderRow]]:
        query = select(OrderRow)

        # Phones are stored as digits only, so a prefix match can use the index
        if filters.phone_prefix:
            query = query.where(OrderRow.customer_phone.startswith(filters.phone_prefix))

        if filters.status is not None:
            query = query.where(OrderRow.status == filters.status.value)

        if filters.day is not None:
            start = datetime.combine(filters.day, time.min, tzinfo=timezone.utc)
            query = query.where(
                OrderRow.created_at >= start,
                OrderRow.created_at < start + timedelta(days=1),
            )
        else:
            if filters.date_from is not None:
                query = query.where(OrderRow.created_at >= filters.date_from)
            if filters.date_to is not None:
                query = query.where(OrderRow.created_at <= filters.date_to)

        return query

    @staticmethod
    def _apply_header(row: OrderRow, order: Order) -> None:
        row.status = order.status.value
        row.currency = order.currency.value
        row.notes = order.notes
        row.customer_name = order.customer.name
        row.customer_phone = order.customer.phone
        row.customer_email = order.customer.email
        row.customer_doc_number = order.customer.doc_number

    @staticmethod
    def _item_row(position: int, item: OrderItem) -> OrderItemRow:
        row = OrderItemRow(
            position=position,
            product_id=uuid.UUID(item.product_id),
            product_title=item.product_title,
            category=item.category,
            subcategory=item.subcategory,
            unit_price=item.unit_price,
            quantity=item.quantity,
            sub_total=item.sub_total,
            grand_total=item.grand_total,
        )
        snapshot = item.financing
        if snapshot is not None:
            row.financing_plan_ref = uuid.UUID(snapshot.plan_ref) if snapshot.plan_ref else None
            row.financing_mode_applied = snapshot.mode_applied.value
            row.financing_group_key = snapshot.group_key
            row.financing_plan_code = snapshot.plan_code
            row.financing_months = snapshot.months
            row.financing_surcharge_pct = snapshot.surcharge_pct
            row.financing_down_pct = snapshot.down_pct
            row.financing_down_amount = snapshot.down_amount
            row.financing_surcharge_amount = snapshot.surcharge_amount
            row.financing_total_with_surcharge = snapshot.total_with_surcharge
            row.financing_installment_amount = snapshot.installment_amount
        return row

    @staticmethod
    def _status_change_row(position: int, change: StatusChange) -> OrderStatusChangeRow:
        return OrderStatusChangeRow(
            position=position,
            at=change.at,
            from_status=change.from_status.value if change.from_status else None,
            to_status=change.to_status.value,
            reason=change.reason,
        )

    @staticmethod
    def _snapshot_to_domain(row: OrderItemRow) -> OrderItemFinancingSnapshot | None:
        if row.financing_mode_applied is None:
            return None
        return OrderItemFinancingSnapshot(
            plan_ref=str(row.financing_plan_ref) if row.financing_plan_ref else None,
            mode_applied=FinancingMode(row.financing_mode_applied),
            group_key=row.financing_group_key,
            plan_code=row.financing_plan_code,
            months=row.financing_months,  # type: ignore[arg-type]
            surcharge_pct=row.financing_surcharge_pct,  # type: ignore[arg-type]
            down_pct=row.financing_down_pct,  # type: ignore[arg-type]
            down_amount=row.financing_down_amount,  # type: ignore[arg-type]
            surcharge_amount=row.financing_surcharge_amount,  # type: ignore[arg-type]
            total_with_surcharge=row.financing_total_with_surcharge,  # type: ignore[arg-type]
            installment_amount=row.financing_installment_amount,  # type: ignore[arg-type]
        )

    def _to_domain(self, row: OrderRow) -> Order:
        return Order(
            id=str(row.id),
            status=OrderStatus(row.status),
            currency=Currency(row.currency),
            notes=row.notes,
            customer=Customer(
                name=row.customer_name,
                phone=row.customer_phone,
                email=row.customer_email,
                doc_number=row.customer_doc_number,
            ),
            items=tuple(
                OrderItem(
                    product_id=str(item.product_id),
                    product_title=item.product_title,
                    category=item.category,
                    subcategory=item.subcategory,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    sub_total=item.sub_total,
                    grand_total=item.grand_total,
                    financing=self._snapshot_to_domain(item),
                )
                for item in row.items
            ),
            totals=OrderTotals(
                items_sub_total=row.items_sub_total,
                surcharge_total=row.surcharge_total,
                discount_total=row.discount_total,
                shipping_total=row.shipping_total,
                grand_total=row.grand_total,
            ),
            status_history=tuple(
                StatusChange(
                    at=change.at,
                    from_status=OrderStatus(change.from_status) if change.from_status else None,
                    to_status=OrderStatus(change.to_status),
                    reason=change.reason,
                )
                for change in row.status_history
            ),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
