"""CLI views: inventory, orders, shipments."""

from scripts.cli.views.inventory import show_inventory_menu
from scripts.cli.views.orders import show_orders_menu
from scripts.cli.views.shipments import show_shipments_menu

__all__ = [
    "show_inventory_menu",
    "show_orders_menu",
    "show_shipments_menu",
]
