"""
Service layer for customer orders.

Order workflow:

    Pending -> Confirmed -> Processing -> Shipped -> Delivered
       |           |
       +-----------+----> Cancelled

Delivered orders cannot be deleted.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future
from datetime import date
from typing import Any

from warehouse_kernel.dao.order_dao import OrderDAO
from warehouse_kernel.domain.clock import Clock
from warehouse_kernel.domain.entities import Order, OrderStats
from warehouse_kernel.domain.status import OrderStatus
from warehouse_kernel.exceptions import ValidationError
from warehouse_kernel.services.base import DEFAULT_WORKER_COUNT, DatedStatusService


class OrderService(DatedStatusService[Order]):
    """
    Service for managing customer orders.

    All public methods return Order records.  Status changes go through
    ``update_status`` or the workflow shortcuts; both check the transition
    table against the persisted status.
    """

    entity_name = "order"
    status_type = OrderStatus

    def __init__(
        self,
        dao: OrderDAO,
        *,
        clock: Clock | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
        recent_window_days: int = 7,
        recent_limit: int = 10,
    ):
        super().__init__(
            dao,
            clock=clock,
            worker_count=worker_count,
            recent_window_days=recent_window_days,
            recent_limit=recent_limit,
        )

    def _validate(self, order: Order) -> None:
        if order is None:
            raise ValidationError("order", "Order cannot be null")
        order.validate(self._today())

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_order(self, order: Order) -> Order:
        """
        Create a new order.

        A missing ``order_date`` defaults to today.

        Raises:
            ValidationError: If the date is in the future or the customer
                name is blank or too long.
        """
        if order is not None and order.order_date is None:
            order.order_date = self._today()
        self._validate(order)
        return self._create(order)

    def update_order(self, order: Order) -> bool:
        """
        Replace date, customer and status of an existing order.

        Returns:
            False if the order does not exist.

        Raises:
            InvalidStatusTransitionError: If the status changed illegally.
            ConcurrentModificationError: If the status changed concurrently.
        """
        self._validate(order)
        return self._update(order)

    def delete_order(self, order_id: int) -> bool:
        """
        Delete an order.

        Returns:
            False if the order does not exist.

        Raises:
            DeleteNotAllowedError: If the order is Delivered.
        """
        return self._delete(order_id, protected=OrderStatus.DELIVERED)

    def find_order(self, order_id: int) -> Order | None:
        return self._find(order_id)

    def list_orders(self) -> list[Order]:
        return self._list()

    def batch_update(self, orders: Iterable[Order]) -> bool:
        return self._batch_update(orders, self._validate)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_by_customer(self, text: str) -> list[Order]:
        """Case-insensitive substring search; blank text lists everything."""
        if text is None or not text.strip():
            return self.list_orders()
        with self._storage_guard("search orders by customer"):
            return self._dao.find_by_customer(text.strip())

    def orders_by_status(self, status: OrderStatus | str) -> list[Order]:
        return self._by_status(status)

    def orders_by_date_range(self, start: date, end: date) -> list[Order]:
        """
        Orders dated within ``[start, end]`` inclusive.

        Raises:
            ValidationError: If ``start`` is after ``end``.
        """
        return self._by_date_range(start, end)

    def recent_orders(self, days: int | None = None, limit: int | None = None) -> list[Order]:
        """Newest orders dated within the last ``days`` days, at most ``limit``."""
        return self._recent(days, limit)

    def pending_orders(self) -> list[Order]:
        return self._by_status(OrderStatus.PENDING)

    def get_stats(self) -> OrderStats:
        return OrderStats(
            total_orders=self._count(),
            status_counts=self._status_counts(),
            recent_orders=tuple(self.recent_orders()),
        )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def update_status(self, order_id: int, status: OrderStatus | str) -> Order:
        """
        Move an order to ``status``.

        Returns:
            The updated order.

        Raises:
            EntityNotFoundError: If the order does not exist.
            InvalidStatusTransitionError: If the move is not allowed.
            ConcurrentModificationError: If the status changed concurrently.
        """
        return self._change_status(order_id, status)

    def confirm_order(self, order_id: int) -> Order:
        return self._change_status(order_id, OrderStatus.CONFIRMED)

    def process_order(self, order_id: int) -> Order:
        return self._change_status(order_id, OrderStatus.PROCESSING)

    def ship_order(self, order_id: int) -> Order:
        return self._change_status(order_id, OrderStatus.SHIPPED)

    def deliver_order(self, order_id: int) -> Order:
        return self._change_status(order_id, OrderStatus.DELIVERED)

    def cancel_order(self, order_id: int) -> Order:
        return self._change_status(order_id, OrderStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Asynchronous calling convention
    # ------------------------------------------------------------------

    def create_order_async(self, order: Order) -> Future[Order]:
        return self.submit(self.create_order, order)

    def update_order_async(self, order: Order) -> Future[bool]:
        return self.submit(self.update_order, order)

    def delete_order_async(self, order_id: int) -> Future[bool]:
        return self.submit(self.delete_order, order_id)

    def find_order_async(self, order_id: int) -> Future[Order | None]:
        return self.submit(self.find_order, order_id)

    def list_orders_async(self) -> Future[list[Order]]:
        return self.submit(self.list_orders)

    def batch_update_async(self, orders: Iterable[Order]) -> Future[bool]:
        return self.submit(self.batch_update, list(orders))

    def search_by_customer_async(self, text: str) -> Future[list[Order]]:
        return self.submit(self.search_by_customer, text)

    def orders_by_status_async(self, status: OrderStatus | str) -> Future[list[Order]]:
        return self.submit(self.orders_by_status, status)

    def orders_by_date_range_async(self, start: date, end: date) -> Future[list[Order]]:
        return self.submit(self.orders_by_date_range, start, end)

    def recent_orders_async(
        self, days: int | None = None, limit: int | None = None
    ) -> Future[list[Order]]:
        return self.submit(self.recent_orders, days, limit)

    def pending_orders_async(self) -> Future[list[Order]]:
        return self.submit(self.pending_orders)

    def get_stats_async(self) -> Future[OrderStats]:
        return self.submit(self.get_stats)

    def update_status_async(self, order_id: int, status: Any) -> Future[Order]:
        return self.submit(self.update_status, order_id, status)

    def confirm_order_async(self, order_id: int) -> Future[Order]:
        return self.submit(self.confirm_order, order_id)

    def process_order_async(self, order_id: int) -> Future[Order]:
        return self.submit(self.process_order, order_id)

    def ship_order_async(self, order_id: int) -> Future[Order]:
        return self.submit(self.ship_order, order_id)

    def deliver_order_async(self, order_id: int) -> Future[Order]:
        return self.submit(self.deliver_order, order_id)

    def cancel_order_async(self, order_id: int) -> Future[Order]:
        return self.submit(self.cancel_order, order_id)
