"""
WarehouseCoordinator -- front-end facade over the three services.

Responsibility:
    Gives a front end one object through which every inventory, order and
    shipment operation is started asynchronously, with progress, success and
    error notifications delivered as plain strings.

Architecture position:
    Kernel > Services -- outermost kernel layer, called by scripts/cli.  Holds
    NO business logic: every decision is made by the services it delegates to.

Invariants enforced:
    - Every operation returns the pool Future of the owning service.
    - Result callbacks and notifications are handed to ``dispatch`` before
      the Future resolves, so a front end that waits on the Future and then
      drains its dispatcher always sees them.
    - No failure is dropped: it reaches ``on_error`` or, if none is set, the
      log.

Failure modes:
    - Exceptions raised by a callback are logged and do not affect the
      Future's outcome.
"""

from __future__ import annotations

import queue
from collections.abc import Callable, Iterable
from concurrent.futures import Future
from datetime import date
from functools import partial
from typing import Any, TypeVar

from warehouse_kernel.dao import InventoryDAO, OrderDAO, ShipmentDAO
from warehouse_kernel.db.engine import Database
from warehouse_kernel.domain.clock import Clock
from warehouse_kernel.domain.entities import InventoryItem, Order, Shipment
from warehouse_kernel.logging_config import get_logger
from warehouse_kernel.services.base import BaseService
from warehouse_kernel.services.inventory_service import InventoryService
from warehouse_kernel.services.order_service import OrderService
from warehouse_kernel.services.shipment_service import ShipmentService

logger = get_logger("services.coordinator")

T = TypeVar("T")

MessageHandler = Callable[[str], None]
Dispatch = Callable[[Callable[[], None]], None]


def root_cause_message(exc: BaseException) -> str:
    """
    Message of the innermost exception in ``exc``'s chain.

    Follows ``__cause__``, then ``__context__`` unless suppressed, the same
    way tracebacks are rendered.  Falls back to the type name when the
    innermost message is empty.
    """
    current = exc
    seen = {id(current)}
    while True:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        current = nxt
    return str(current) or type(current).__name__


def _run_inline(fn: Callable[[], None]) -> None:
    fn()


class MainThreadDispatcher:
    """
    Queue-backed dispatcher for a single-threaded front end.

    Callbacks are queued from worker threads and executed only when the
    owning thread calls ``run_pending()`` or ``wait_for()``, mirroring a UI
    event loop.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def __call__(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def run_pending(self) -> int:
        """Run every queued callback; return how many ran."""
        ran = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return ran
            fn()
            ran += 1

    def wait_for(self, future: Future[T], timeout: float | None = None) -> Future[T]:
        """Block until ``future`` is done, then run the callbacks it queued."""
        future.exception(timeout=timeout)
        self.run_pending()
        return future


class WarehouseCoordinator:
    """
    Facade that starts service operations and routes their outcomes.

    Contract:
        ``coordinator.<op>(..., on_success=callback)`` submits the service
        operation to the owning service's pool and returns its Future.
        ``callback`` receives the operation's result.
    """

    def __init__(
        self,
        inventory: InventoryService,
        orders: OrderService,
        shipments: ShipmentService,
        dispatch: Dispatch | None = None,
    ):
        self.inventory = inventory
        self.orders = orders
        self.shipments = shipments
        self._dispatch = dispatch or _run_inline
        self._on_error: MessageHandler | None = None
        self._on_success: MessageHandler | None = None
        self._on_progress: MessageHandler | None = None

    @classmethod
    def from_database(
        cls,
        db: Database,
        settings: Any = None,
        *,
        clock: Clock | None = None,
        dispatch: Dispatch | None = None,
    ) -> WarehouseCoordinator:
        """Build DAOs and services for ``db`` using ``settings`` (or defaults)."""
        from warehouse_config import WarehouseSettings

        settings = settings or WarehouseSettings()
        inventory = InventoryService(
            InventoryDAO(db),
            clock=clock,
            worker_count=settings.worker_count,
            low_stock_threshold=settings.low_stock_threshold,
        )
        orders = OrderService(
            OrderDAO(db),
            clock=clock,
            worker_count=settings.worker_count,
            recent_window_days=settings.recent_window_days,
            recent_limit=settings.recent_limit,
        )
        shipments = ShipmentService(
            ShipmentDAO(db),
            clock=clock,
            worker_count=settings.worker_count,
            delayed_days=settings.delayed_shipment_days,
            max_lead_days=settings.max_shipment_lead_days,
            recent_window_days=settings.recent_window_days,
            recent_limit=settings.recent_limit,
        )
        return cls(inventory, orders, shipments, dispatch=dispatch)

    def set_event_handlers(
        self,
        on_error: MessageHandler | None = None,
        on_success: MessageHandler | None = None,
        on_progress: MessageHandler | None = None,
    ) -> None:
        self._on_error = on_error
        self._on_success = on_success
        self._on_progress = on_progress

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _run(
        self,
        service: BaseService,
        op: Callable[..., T],
        *args: Any,
        progress: str,
        on_success: Callable[[T], None] | None = None,
        message: str | None = None,
    ) -> Future[T]:
        if self._on_progress is not None:
            self._on_progress(progress)
        return service.submit(self._invoke, op, args, on_success, message)

    def _invoke(
        self,
        op: Callable[..., T],
        args: tuple,
        on_success: Callable[[T], None] | None,
        message: str | None,
    ) -> T:
        try:
            result = op(*args)
        except Exception as exc:
            self._dispatch(partial(self._report_error, exc))
            raise
        self._dispatch(partial(self._deliver, result, on_success, message))
        return result

    def _deliver(
        self,
        result: Any,
        on_success: Callable[[Any], None] | None,
        message: str | None,
    ) -> None:
        try:
            if on_success is not None:
                on_success(result)
            if message and self._on_success is not None:
                self._on_success(message)
        except Exception:
            logger.exception("callback_failed")

    def _report_error(self, exc: BaseException) -> None:
        message = root_cause_message(exc)
        if self._on_error is None:
            logger.error(
                "operation_failed",
                extra={"error": message},
                exc_info=(type(exc), exc, exc.__traceback__),
            )
            return
        try:
            self._on_error(message)
        except Exception:
            logger.exception("error_handler_failed")

    def shutdown(self, wait: bool = True) -> None:
        """Stop all three service pools."""
        for service in (self.inventory, self.orders, self.shipments):
            service.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def create_item(self, item: InventoryItem, on_success=None) -> Future[InventoryItem]:
        return self._run(
            self.inventory, self.inventory.create_item, item,
            progress="Creating inventory item...", on_success=on_success,
            message="Inventory item created",
        )

    def update_item(self, item: InventoryItem, on_success=None) -> Future[bool]:
        return self._run(
            self.inventory, self.inventory.update_item, item,
            progress="Updating inventory item...", on_success=on_success,
            message="Inventory item updated",
        )

    def delete_item(self, item_id: int, on_success=None) -> Future[bool]:
        return self._run(
            self.inventory, self.inventory.delete_item, item_id,
            progress="Deleting inventory item...", on_success=on_success,
        )

    def find_item(self, item_id: int, on_success=None) -> Future[InventoryItem | None]:
        return self._run(
            self.inventory, self.inventory.find_item, item_id,
            progress="Loading inventory item...", on_success=on_success,
        )

    def list_items(self, on_success=None) -> Future[list[InventoryItem]]:
        return self._run(
            self.inventory, self.inventory.list_items,
            progress="Loading inventory...", on_success=on_success,
        )

    def search_items_by_name(self, text: str, on_success=None) -> Future[list[InventoryItem]]:
        return self._run(
            self.inventory, self.inventory.search_by_name, text,
            progress="Searching inventory...", on_success=on_success,
        )

    def search_items_by_location(
        self, text: str, on_success=None
    ) -> Future[list[InventoryItem]]:
        return self._run(
            self.inventory, self.inventory.search_by_location, text,
            progress="Searching inventory...", on_success=on_success,
        )

    def low_stock_items(
        self, threshold: int | None = None, on_success=None
    ) -> Future[list[InventoryItem]]:
        return self._run(
            self.inventory, self.inventory.low_stock_items, threshold,
            progress="Checking stock levels...", on_success=on_success,
        )

    def set_quantity(self, item_id: int, quantity: int, on_success=None) -> Future[InventoryItem]:
        return self._run(
            self.inventory, self.inventory.set_quantity, item_id, quantity,
            progress="Updating quantity...", on_success=on_success,
            message="Quantity updated",
        )

    def add_stock(self, item_id: int, quantity: int, on_success=None) -> Future[InventoryItem]:
        return self._run(
            self.inventory, self.inventory.add_stock, item_id, quantity,
            progress="Adding stock...", on_success=on_success,
            message="Stock added",
        )

    def remove_stock(self, item_id: int, quantity: int, on_success=None) -> Future[InventoryItem]:
        return self._run(
            self.inventory, self.inventory.remove_stock, item_id, quantity,
            progress="Removing stock...", on_success=on_success,
            message="Stock removed",
        )

    def batch_update_items(self, items: Iterable[InventoryItem], on_success=None) -> Future[bool]:
        return self._run(
            self.inventory, self.inventory.batch_update, list(items),
            progress="Updating inventory items...", on_success=on_success,
        )

    def inventory_stats(self, on_success=None):
        return self._run(
            self.inventory, self.inventory.get_stats,
            progress="Computing inventory statistics...", on_success=on_success,
        )

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def create_order(self, order: Order, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.create_order, order,
            progress="Creating order...", on_success=on_success,
            message="Order created",
        )

    def update_order(self, order: Order, on_success=None) -> Future[bool]:
        return self._run(
            self.orders, self.orders.update_order, order,
            progress="Updating order...", on_success=on_success,
            message="Order updated",
        )

    def delete_order(self, order_id: int, on_success=None) -> Future[bool]:
        return self._run(
            self.orders, self.orders.delete_order, order_id,
            progress="Deleting order...", on_success=on_success,
        )

    def find_order(self, order_id: int, on_success=None) -> Future[Order | None]:
        return self._run(
            self.orders, self.orders.find_order, order_id,
            progress="Loading order...", on_success=on_success,
        )

    def list_orders(self, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.list_orders,
            progress="Loading orders...", on_success=on_success,
        )

    def search_orders_by_customer(self, text: str, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.search_by_customer, text,
            progress="Searching orders...", on_success=on_success,
        )

    def orders_by_status(self, status, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.orders_by_status, status,
            progress="Loading orders...", on_success=on_success,
        )

    def orders_by_date_range(self, start: date, end: date, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.orders_by_date_range, start, end,
            progress="Loading orders...", on_success=on_success,
        )

    def recent_orders(self, days=None, limit=None, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.recent_orders, days, limit,
            progress="Loading recent orders...", on_success=on_success,
        )

    def pending_orders(self, on_success=None) -> Future[list[Order]]:
        return self._run(
            self.orders, self.orders.pending_orders,
            progress="Loading pending orders...", on_success=on_success,
        )

    def update_order_status(self, order_id: int, status, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.update_status, order_id, status,
            progress="Updating order status...", on_success=on_success,
            message="Order status updated",
        )

    def confirm_order(self, order_id: int, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.confirm_order, order_id,
            progress="Confirming order...", on_success=on_success,
            message="Order confirmed",
        )

    def process_order(self, order_id: int, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.process_order, order_id,
            progress="Processing order...", on_success=on_success,
            message="Order is being processed",
        )

    def ship_order(self, order_id: int, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.ship_order, order_id,
            progress="Shipping order...", on_success=on_success,
            message="Order shipped",
        )

    def deliver_order(self, order_id: int, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.deliver_order, order_id,
            progress="Delivering order...", on_success=on_success,
            message="Order delivered",
        )

    def cancel_order(self, order_id: int, on_success=None) -> Future[Order]:
        return self._run(
            self.orders, self.orders.cancel_order, order_id,
            progress="Cancelling order...", on_success=on_success,
            message="Order cancelled",
        )

    def batch_update_orders(self, orders: Iterable[Order], on_success=None) -> Future[bool]:
        return self._run(
            self.orders, self.orders.batch_update, list(orders),
            progress="Updating orders...", on_success=on_success,
        )

    def order_stats(self, on_success=None):
        return self._run(
            self.orders, self.orders.get_stats,
            progress="Computing order statistics...", on_success=on_success,
        )

    # ------------------------------------------------------------------
    # Shipments
    # ------------------------------------------------------------------

    def create_shipment(self, shipment: Shipment, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.create_shipment, shipment,
            progress="Creating shipment...", on_success=on_success,
            message="Shipment created",
        )

    def update_shipment(self, shipment: Shipment, on_success=None) -> Future[bool]:
        return self._run(
            self.shipments, self.shipments.update_shipment, shipment,
            progress="Updating shipment...", on_success=on_success,
            message="Shipment updated",
        )

    def delete_shipment(self, shipment_id: int, on_success=None) -> Future[bool]:
        return self._run(
            self.shipments, self.shipments.delete_shipment, shipment_id,
            progress="Deleting shipment...", on_success=on_success,
        )

    def find_shipment(self, shipment_id: int, on_success=None) -> Future[Shipment | None]:
        return self._run(
            self.shipments, self.shipments.find_shipment, shipment_id,
            progress="Loading shipment...", on_success=on_success,
        )

    def list_shipments(self, on_success=None) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.list_shipments,
            progress="Loading shipments...", on_success=on_success,
        )

    def search_shipments_by_destination(
        self, text: str, on_success=None
    ) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.search_by_destination, text,
            progress="Searching shipments...", on_success=on_success,
        )

    def shipments_by_status(self, status, on_success=None) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.shipments_by_status, status,
            progress="Loading shipments...", on_success=on_success,
        )

    def shipments_by_date_range(
        self, start: date, end: date, on_success=None
    ) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.shipments_by_date_range, start, end,
            progress="Loading shipments...", on_success=on_success,
        )

    def recent_shipments(self, days=None, limit=None, on_success=None) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.recent_shipments, days, limit,
            progress="Loading recent shipments...", on_success=on_success,
        )

    def delayed_shipments(self, threshold_days=None, on_success=None) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.delayed_shipments, threshold_days,
            progress="Checking for delayed shipments...", on_success=on_success,
        )

    def trackable_shipments(self, on_success=None) -> Future[list[Shipment]]:
        return self._run(
            self.shipments, self.shipments.trackable_shipments,
            progress="Loading trackable shipments...", on_success=on_success,
        )

    def update_shipment_status(self, shipment_id: int, status, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.update_status, shipment_id, status,
            progress="Updating shipment status...", on_success=on_success,
            message="Shipment status updated",
        )

    def dispatch_shipment(self, shipment_id: int, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.dispatch_shipment, shipment_id,
            progress="Dispatching shipment...", on_success=on_success,
            message="Shipment dispatched",
        )

    def mark_out_for_delivery(self, shipment_id: int, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.mark_out_for_delivery, shipment_id,
            progress="Updating shipment...", on_success=on_success,
            message="Shipment out for delivery",
        )

    def deliver_shipment(self, shipment_id: int, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.deliver_shipment, shipment_id,
            progress="Delivering shipment...", on_success=on_success,
            message="Shipment delivered",
        )

    def return_shipment(self, shipment_id: int, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.return_shipment, shipment_id,
            progress="Returning shipment...", on_success=on_success,
            message="Shipment returned",
        )

    def cancel_shipment(self, shipment_id: int, on_success=None) -> Future[Shipment]:
        return self._run(
            self.shipments, self.shipments.cancel_shipment, shipment_id,
            progress="Cancelling shipment...", on_success=on_success,
            message="Shipment cancelled",
        )

    def batch_update_shipments(
        self, shipments: Iterable[Shipment], on_success=None
    ) -> Future[bool]:
        return self._run(
            self.shipments, self.shipments.batch_update, list(shipments),
            progress="Updating shipments...", on_success=on_success,
        )

    def shipment_stats(self, on_success=None):
        return self._run(
            self.shipments, self.shipments.get_stats,
            progress="Computing shipment statistics...", on_success=on_success,
        )
