#!/usr/bin/env python3
"""
Seed the warehouse database with demo inventory, orders and shipments.

Drops all tables, recreates them, then creates records and walks some of
them through their workflows so every status appears in the menus.

Usage:
    python3 scripts/seed_data.py [--database warehouse.db] [--config settings.yaml]
"""

import argparse
import dataclasses
import logging
import sys
from datetime import timedelta
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

ITEMS = [
    ("Pallet Jack", 4, "Aisle A1"),
    ("Shrink Wrap Roll", 120, "Aisle A2"),
    ("Cardboard Box (Large)", 350, "Aisle B1"),
    ("Cardboard Box (Small)", 8, "Aisle B1"),
    ("Packing Tape", 60, "Aisle B2"),
    ("Barcode Labels", 2, "Office"),
    ("Safety Gloves", 25, "Aisle C3"),
]

# (customer, days ago, workflow steps)
ORDERS = [
    ("Acme Corporation", 0, []),
    ("Globex Ltd", 1, ["confirm_order"]),
    ("Initech", 2, ["confirm_order", "process_order"]),
    ("Umbrella Supplies", 3, ["confirm_order", "process_order", "ship_order"]),
    ("Stark Industries", 5, ["confirm_order", "process_order", "ship_order", "deliver_order"]),
    ("Wayne Enterprises", 6, ["cancel_order"]),
]

# (destination, days ago, workflow steps)
SHIPMENTS = [
    ("Berlin, DE", 0, []),
    ("Lyon, FR", 2, ["dispatch_shipment"]),
    ("Leeds, UK", 3, ["dispatch_shipment", "mark_out_for_delivery"]),
    ("Porto, PT", 4, ["dispatch_shipment", "mark_out_for_delivery", "deliver_shipment"]),
    ("Milan, IT", 12, ["dispatch_shipment"]),
    ("Oslo, NO", 20, ["dispatch_shipment", "return_shipment"]),
]


def main(argv=None) -> int:
    from scripts.cli.util import enable_quiet_logging, restore_logging
    from warehouse_config import get_settings
    from warehouse_kernel.db.engine import Database
    from warehouse_kernel.domain.entities import InventoryItem, Order, Shipment
    from warehouse_kernel.exceptions import DatabaseConnectionError, WarehouseKernelError
    from warehouse_kernel.logging_config import configure_logging
    from warehouse_kernel.services.coordinator import WarehouseCoordinator

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--database", help="SQLite database file")
    parser.add_argument("--config", help="YAML settings file")
    args = parser.parse_args(argv)

    settings = get_settings(args.config)
    if args.database:
        settings = dataclasses.replace(settings, database_path=args.database)
    configure_logging(level=logging.WARNING)

    # -----------------------------------------------------------------
    # 1. Connect + reset
    # -----------------------------------------------------------------
    print()
    print(f"  [1/4] Opening {settings.database_path}...")
    db = Database.from_settings(settings)
    try:
        db.ensure_schema()
        print("  [2/4] Dropping old tables and recreating schema...")
        db.drop_schema()
        db.ensure_schema()
    except DatabaseConnectionError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        db.dispose()
        return 1

    coordinator = WarehouseCoordinator.from_database(db, settings)
    inventory = coordinator.inventory
    orders = coordinator.orders
    shipments = coordinator.shipments
    today = orders.clock.today()

    # -----------------------------------------------------------------
    # 2. Inventory
    # -----------------------------------------------------------------
    muted = enable_quiet_logging()
    try:
        print(f"  [3/4] Creating {len(ITEMS)} inventory items...")
        for name, quantity, location in ITEMS:
            item = inventory.create_item(InventoryItem(name, quantity, location))
            print(f"         {item.id}. {item.name} x{item.quantity} @ {item.location}")

        # -------------------------------------------------------------
        # 3. Orders and shipments
        # -------------------------------------------------------------
        print(f"  [4/4] Creating {len(ORDERS)} orders and {len(SHIPMENTS)} shipments...")
        failures = 0
        for service, factory, records in (
            (orders, lambda text, day: orders.create_order(Order(text, day)), ORDERS),
            (shipments, lambda text, day: shipments.create_shipment(Shipment(text, day)), SHIPMENTS),
        ):
            for text, days_ago, steps in records:
                record = factory(text, today - timedelta(days=days_ago))
                try:
                    for step in steps:
                        record = getattr(service, step)(record.id)
                except WarehouseKernelError as exc:
                    failures += 1
                    print(f"         FAIL: {text} - {exc}")
                    continue
                print(f"         {record.id}. [{record.status.value}] {text}")

        inventory_stats = inventory.get_stats()
        shipment_stats = shipments.get_stats()
        db_stats = db.get_stats()
    finally:
        restore_logging(muted)
        coordinator.shutdown()
        db.dispose()

    print()
    print(f"  Done. Database seeded with {db_stats.total_records} records.")
    print(f"    Low stock items:   {len(inventory_stats.low_stock_items)}")
    print(f"    Delayed shipments: {len(shipment_stats.delayed_shipments)}")
    print()
    print("  Quick-start:")
    print(f"    python3 -m scripts.cli --database {settings.database_path}")
    print()
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
