"""Data access for customer orders."""

from __future__ import annotations

from typing import Any

from warehouse_kernel.dao.base import DatedStatusDAO
from warehouse_kernel.domain.entities import Order
from warehouse_kernel.domain.status import OrderStatus
from warehouse_kernel.models.order import OrderModel


class OrderDAO(DatedStatusDAO[OrderModel, Order]):
    """Data-access component for the ``orders`` table."""

    model = OrderModel
    entity_name = "order"
    status_type = OrderStatus

    @property
    def _date_column(self):
        return OrderModel.order_date

    def _to_entity(self, row: OrderModel) -> Order:
        return Order(
            id=row.id,
            order_date=row.order_date,
            customer_name=row.customer_name,
            status=OrderStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _values(self, entity: Order) -> dict[str, Any]:
        return {
            "order_date": entity.order_date,
            "customer_name": entity.customer_name,
            "status": entity.status.value,
        }

    def find_by_customer(self, pattern: str) -> list[Order]:
        return self._matching(OrderModel.customer_name, pattern)
