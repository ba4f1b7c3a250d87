"""CLI menus: print the main and per-entity menus."""

from scripts.cli.util import banner

MAIN_MENU = (
    ("1", "Inventory"),
    ("2", "Orders"),
    ("3", "Shipments"),
    ("0", "Exit"),
)

INVENTORY_MENU = (
    ("1", "List all items"),
    ("2", "Search by ID"),
    ("3", "Search by name"),
    ("4", "Search by location"),
    ("5", "Add item"),
    ("6", "Update item"),
    ("7", "Delete item"),
    ("8", "Low stock report"),
    ("9", "Adjust stock"),
    ("0", "Back"),
)

ORDER_MENU = (
    ("1", "List all orders"),
    ("2", "Search by ID"),
    ("3", "Search by customer"),
    ("4", "Filter by status"),
    ("5", "Add order"),
    ("6", "Update order"),
    ("7", "Order workflow"),
    ("8", "Delete order"),
    ("9", "Order statistics"),
    ("0", "Back"),
)

ORDER_WORKFLOW_MENU = (
    ("1", "Confirm order"),
    ("2", "Process order"),
    ("3", "Ship order"),
    ("4", "Deliver order"),
    ("5", "Cancel order"),
    ("0", "Back"),
)

SHIPMENT_MENU = (
    ("1", "List all shipments"),
    ("2", "Search by ID"),
    ("3", "Search by destination"),
    ("4", "Filter by status"),
    ("5", "Add shipment"),
    ("6", "Update shipment"),
    ("7", "Shipment workflow"),
    ("8", "Delete shipment"),
    ("9", "Delayed shipments"),
    ("10", "Shipment statistics"),
    ("0", "Back"),
)

SHIPMENT_WORKFLOW_MENU = (
    ("1", "Dispatch (In Transit)"),
    ("2", "Out for delivery"),
    ("3", "Mark delivered"),
    ("4", "Mark returned"),
    ("5", "Cancel shipment"),
    ("0", "Back"),
)


def print_menu(title: str, options) -> None:
    banner(title)
    for key, label in options:
        print(f"   {key:>2}.  {label}")
    print()


def option_range(options) -> str:
    keys = sorted(int(key) for key, _ in options)
    return f"[{keys[0]}-{keys[-1]}]"
