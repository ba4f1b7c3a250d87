"""CLI views: orders, the order workflow and order statistics."""

from __future__ import annotations

from scripts.cli.app import FAILED, CliApp, run_menu
from scripts.cli.menu import ORDER_MENU, ORDER_WORKFLOW_MENU
from scripts.cli.util import (
    banner,
    confirm,
    fmt_date,
    prompt,
    prompt_date,
    prompt_int,
    prompt_status,
    prompt_text,
)
from warehouse_kernel.domain.entities import Order
from warehouse_kernel.domain.status import OrderStatus


def print_orders(orders: list[Order], title: str = "ORDERS") -> None:
    if not orders:
        print("\n  No orders found.\n")
        return
    banner(title)
    print(f"  {'ID':>5}  {'Date':<10}  {'Customer':<32} {'Status':<12}")
    print(f"  {'-'*5}  {'-'*10}  {'-'*32} {'-'*12}")
    for o in orders:
        print(f"  {o.id:>5}  {fmt_date(o.order_date):<10}  {o.customer_name[:32]:<32} {o.status.value:<12}")
    print(f"\n  Total: {len(orders)} orders")
    print()


def print_order(order: Order) -> None:
    print()
    print(f"  ID:        {order.id}")
    print(f"  Date:      {fmt_date(order.order_date)}")
    print(f"  Customer:  {order.customer_name}")
    print(f"  Status:    {order.status.value}")
    print()


def _load(app: CliApp) -> Order | None:
    order_id = prompt_int("Order ID", minimum=1)
    order = app.call(app.coordinator.find_order, order_id)
    if order is FAILED:
        return None
    if order is None:
        print(f"\n  No order with ID {order_id}.")
        return None
    return order


def list_orders(app: CliApp) -> None:
    orders = app.call(app.coordinator.list_orders)
    if orders is not FAILED:
        print_orders(orders)


def find_by_id(app: CliApp) -> None:
    order = _load(app)
    if order is not None:
        print_order(order)


def search_by_customer(app: CliApp) -> None:
    text = prompt("Customer contains")
    orders = app.call(app.coordinator.search_orders_by_customer, text)
    if orders is not FAILED:
        print_orders(orders, "SEARCH RESULTS")


def filter_by_status(app: CliApp) -> None:
    status = prompt_status("Status", OrderStatus)
    orders = app.call(app.coordinator.orders_by_status, status)
    if orders is not FAILED:
        print_orders(orders, f"ORDERS: {status.value.upper()}")


def add_order(app: CliApp) -> None:
    today = app.coordinator.orders.clock.today()
    order = Order(
        customer_name=prompt_text("Customer name"),
        order_date=prompt_date("Order date", default=today),
    )
    created = app.call(app.coordinator.create_order, order)
    if created is not FAILED:
        print(f"  Created order {created.id} ({created.status.value}).")


def update_order(app: CliApp) -> None:
    order = _load(app)
    if order is None:
        return
    print("  Press Enter to keep current value.")
    order.customer_name = prompt_text("Customer name", default=order.customer_name)
    order.order_date = prompt_date("Order date", default=order.order_date)
    order.status = prompt_status("Status", OrderStatus, default=order.status)
    updated = app.call(app.coordinator.update_order, order)
    if updated is False:
        print(f"\n  Order {order.id} no longer exists.")


def delete_order(app: CliApp) -> None:
    order = _load(app)
    if order is None:
        return
    if not confirm(f"Delete order {order.id} for '{order.customer_name}'?"):
        print("  Cancelled.")
        return
    deleted = app.call(app.coordinator.delete_order, order.id)
    if deleted is True:
        print("  Order deleted.")
    elif deleted is False:
        print(f"\n  Order {order.id} no longer exists.")


def order_workflow(app: CliApp) -> None:
    c = app.coordinator

    def step(action):
        def run() -> None:
            order_id = prompt_int("Order ID", minimum=1)
            order = app.call(action, order_id)
            if order is not FAILED:
                print(f"  Order {order.id} is now {order.status.value}.")
        return run

    run_menu("ORDER WORKFLOW", ORDER_WORKFLOW_MENU, {
        "1": step(c.confirm_order),
        "2": step(c.process_order),
        "3": step(c.ship_order),
        "4": step(c.deliver_order),
        "5": step(c.cancel_order),
    })


def order_stats(app: CliApp) -> None:
    stats = app.call(app.coordinator.order_stats)
    if stats is FAILED:
        return
    banner("ORDER STATISTICS")
    print(f"  Total orders: {stats.total_orders}")
    print()
    for status, count in stats.status_counts.items():
        print(f"    {status.value:<12} {count:>6}")
    print(f"\n  Recent orders: {len(stats.recent_orders)}")
    print()


def show_orders_menu(app: CliApp) -> None:
    run_menu("ORDERS", ORDER_MENU, {
        "1": lambda: list_orders(app),
        "2": lambda: find_by_id(app),
        "3": lambda: search_by_customer(app),
        "4": lambda: filter_by_status(app),
        "5": lambda: add_order(app),
        "6": lambda: update_order(app),
        "7": lambda: order_workflow(app),
        "8": lambda: delete_order(app),
        "9": lambda: order_stats(app),
    })
