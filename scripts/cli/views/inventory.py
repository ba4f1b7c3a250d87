"""CLI views: inventory listing, search, edits and stock movements."""

from __future__ import annotations

from scripts.cli.app import FAILED, CliApp, run_menu
from scripts.cli.menu import INVENTORY_MENU
from scripts.cli.util import banner, confirm, prompt, prompt_int, prompt_text
from warehouse_kernel.domain.entities import InventoryItem


def print_items(items: list[InventoryItem], title: str = "INVENTORY") -> None:
    if not items:
        print("\n  No items found.\n")
        return
    banner(title)
    print(f"  {'ID':>5}  {'Name':<32} {'Qty':>8}  {'Location':<20}")
    print(f"  {'-'*5}  {'-'*32} {'-'*8}  {'-'*20}")
    for item in items:
        print(f"  {item.id:>5}  {item.name[:32]:<32} {item.quantity:>8}  {item.location[:20]:<20}")
    print(f"\n  Total: {len(items)} items")
    print()


def print_item(item: InventoryItem) -> None:
    print()
    print(f"  ID:        {item.id}")
    print(f"  Name:      {item.name}")
    print(f"  Quantity:  {item.quantity}")
    print(f"  Location:  {item.location}")
    print()


def _load(app: CliApp) -> InventoryItem | None:
    item_id = prompt_int("Item ID", minimum=1)
    item = app.call(app.coordinator.find_item, item_id)
    if item is FAILED:
        return None
    if item is None:
        print(f"\n  No item with ID {item_id}.")
        return None
    return item


def list_items(app: CliApp) -> None:
    items = app.call(app.coordinator.list_items)
    if items is not FAILED:
        print_items(items)


def find_by_id(app: CliApp) -> None:
    item = _load(app)
    if item is not None:
        print_item(item)


def search_by_name(app: CliApp) -> None:
    text = prompt("Name contains")
    items = app.call(app.coordinator.search_items_by_name, text)
    if items is not FAILED:
        print_items(items, "SEARCH RESULTS")


def search_by_location(app: CliApp) -> None:
    text = prompt("Location contains")
    items = app.call(app.coordinator.search_items_by_location, text)
    if items is not FAILED:
        print_items(items, "SEARCH RESULTS")


def add_item(app: CliApp) -> None:
    item = InventoryItem(
        name=prompt_text("Name"),
        quantity=prompt_int("Quantity", minimum=0),
        location=prompt_text("Location"),
    )
    created = app.call(app.coordinator.create_item, item)
    if created is not FAILED:
        print(f"  Created item {created.id}.")


def update_item(app: CliApp) -> None:
    item = _load(app)
    if item is None:
        return
    print("  Press Enter to keep current value.")
    item.name = prompt_text("Name", default=item.name)
    item.quantity = prompt_int("Quantity", default=item.quantity, minimum=0)
    item.location = prompt_text("Location", default=item.location)
    updated = app.call(app.coordinator.update_item, item)
    if updated is False:
        print(f"\n  Item {item.id} no longer exists.")


def delete_item(app: CliApp) -> None:
    item = _load(app)
    if item is None:
        return
    if not confirm(f"Delete '{item.name}'?"):
        print("  Cancelled.")
        return
    deleted = app.call(app.coordinator.delete_item, item.id)
    if deleted is True:
        print("  Item deleted.")
    elif deleted is False:
        print(f"\n  Item {item.id} no longer exists.")


def low_stock(app: CliApp) -> None:
    threshold = prompt_int(
        "Threshold",
        default=app.coordinator.inventory.low_stock_threshold,
        minimum=0,
    )
    items = app.call(app.coordinator.low_stock_items, threshold)
    if items is not FAILED:
        print_items(items, f"LOW STOCK (<= {threshold})")


def adjust_stock(app: CliApp) -> None:
    item = _load(app)
    if item is None:
        return
    print(f"  Current quantity: {item.quantity}")
    print("    1. Add stock")
    print("    2. Remove stock")
    print("    3. Set quantity")
    choice = prompt("Select option [1-3]")
    if choice == "1":
        updated = app.call(app.coordinator.add_stock, item.id, prompt_int("Quantity to add", minimum=1))
    elif choice == "2":
        updated = app.call(app.coordinator.remove_stock, item.id, prompt_int("Quantity to remove", minimum=1))
    elif choice == "3":
        updated = app.call(app.coordinator.set_quantity, item.id, prompt_int("New quantity", minimum=0))
    else:
        print(f"\n  Invalid option '{choice}'.")
        return
    if updated is not FAILED:
        print(f"  New quantity: {updated.quantity}")


def show_inventory_menu(app: CliApp) -> None:
    run_menu("INVENTORY", INVENTORY_MENU, {
        "1": lambda: list_items(app),
        "2": lambda: find_by_id(app),
        "3": lambda: search_by_name(app),
        "4": lambda: search_by_location(app),
        "5": lambda: add_item(app),
        "6": lambda: update_item(app),
        "7": lambda: delete_item(app),
        "8": lambda: low_stock(app),
        "9": lambda: adjust_stock(app),
    })
