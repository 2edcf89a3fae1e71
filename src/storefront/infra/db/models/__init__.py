from storefront.infra.db.models.base import Base
from storefront.infra.db.models.financing import FinancingGroupRow, FinancingPlanRow
from storefront.infra.db.models.order import OrderItemRow, OrderRow, OrderStatusChangeRow
from storefront.infra.db.models.product import ProductRow

__all__ = [
    "Base",
    "FinancingGroupRow",
    "FinancingPlanRow",
    "OrderItemRow",
    "OrderRow",
    "OrderStatusChangeRow",
    "ProductRow",
]
