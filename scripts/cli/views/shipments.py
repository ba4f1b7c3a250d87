"""CLI views: shipments, the delivery workflow and delayed-shipment report."""

from __future__ import annotations

from scripts.cli.app import FAILED, CliApp, run_menu
from scripts.cli.menu import SHIPMENT_MENU, SHIPMENT_WORKFLOW_MENU
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
from warehouse_kernel.domain.entities import Shipment
from warehouse_kernel.domain.status import ShipmentStatus


def print_shipments(shipments: list[Shipment], title: str = "SHIPMENTS") -> None:
    if not shipments:
        print("\n  No shipments found.\n")
        return
    banner(title)
    print(f"  {'ID':>5}  {'Date':<10}  {'Destination':<30} {'Status':<16}")
    print(f"  {'-'*5}  {'-'*10}  {'-'*30} {'-'*16}")
    for s in shipments:
        print(f"  {s.id:>5}  {fmt_date(s.shipment_date):<10}  {s.destination[:30]:<30} {s.status.value:<16}")
    print(f"\n  Total: {len(shipments)} shipments")
    print()


def print_shipment(shipment: Shipment) -> None:
    print()
    print(f"  ID:           {shipment.id}")
    print(f"  Date:         {fmt_date(shipment.shipment_date)}")
    print(f"  Destination:  {shipment.destination}")
    print(f"  Status:       {shipment.status.value}")
    print()


def _load(app: CliApp) -> Shipment | None:
    shipment_id = prompt_int("Shipment ID", minimum=1)
    shipment = app.call(app.coordinator.find_shipment, shipment_id)
    if shipment is FAILED:
        return None
    if shipment is None:
        print(f"\n  No shipment with ID {shipment_id}.")
        return None
    return shipment


def list_shipments(app: CliApp) -> None:
    shipments = app.call(app.coordinator.list_shipments)
    if shipments is not FAILED:
        print_shipments(shipments)


def find_by_id(app: CliApp) -> None:
    shipment = _load(app)
    if shipment is not None:
        print_shipment(shipment)


def search_by_destination(app: CliApp) -> None:
    text = prompt("Destination contains")
    shipments = app.call(app.coordinator.search_shipments_by_destination, text)
    if shipments is not FAILED:
        print_shipments(shipments, "SEARCH RESULTS")


def filter_by_status(app: CliApp) -> None:
    status = prompt_status("Status", ShipmentStatus)
    shipments = app.call(app.coordinator.shipments_by_status, status)
    if shipments is not FAILED:
        print_shipments(shipments, f"SHIPMENTS: {status.value.upper()}")


def add_shipment(app: CliApp) -> None:
    today = app.coordinator.shipments.clock.today()
    shipment = Shipment(
        destination=prompt_text("Destination"),
        shipment_date=prompt_date("Shipment date", default=today),
    )
    created = app.call(app.coordinator.create_shipment, shipment)
    if created is not FAILED:
        print(f"  Created shipment {created.id} ({created.status.value}).")


def update_shipment(app: CliApp) -> None:
    shipment = _load(app)
    if shipment is None:
        return
    print("  Press Enter to keep current value.")
    shipment.destination = prompt_text("Destination", default=shipment.destination)
    shipment.shipment_date = prompt_date("Shipment date", default=shipment.shipment_date)
    shipment.status = prompt_status("Status", ShipmentStatus, default=shipment.status)
    updated = app.call(app.coordinator.update_shipment, shipment)
    if updated is False:
        print(f"\n  Shipment {shipment.id} no longer exists.")


def delete_shipment(app: CliApp) -> None:
    shipment = _load(app)
    if shipment is None:
        return
    if not confirm(f"Delete shipment {shipment.id} to '{shipment.destination}'?"):
        print("  Cancelled.")
        return
    deleted = app.call(app.coordinator.delete_shipment, shipment.id)
    if deleted is True:
        print("  Shipment deleted.")
    elif deleted is False:
        print(f"\n  Shipment {shipment.id} no longer exists.")


def shipment_workflow(app: CliApp) -> None:
    c = app.coordinator

    def step(action):
        def run() -> None:
            shipment_id = prompt_int("Shipment ID", minimum=1)
            shipment = app.call(action, shipment_id)
            if shipment is not FAILED:
                print(f"  Shipment {shipment.id} is now {shipment.status.value}.")
        return run

    run_menu("SHIPMENT WORKFLOW", SHIPMENT_WORKFLOW_MENU, {
        "1": step(c.dispatch_shipment),
        "2": step(c.mark_out_for_delivery),
        "3": step(c.deliver_shipment),
        "4": step(c.return_shipment),
        "5": step(c.cancel_shipment),
    })


def delayed_shipments(app: CliApp) -> None:
    days = prompt_int(
        "Days overdue",
        default=app.coordinator.shipments.delayed_days,
        minimum=0,
    )
    shipments = app.call(app.coordinator.delayed_shipments, days)
    if shipments is not FAILED:
        print_shipments(shipments, f"DELAYED SHIPMENTS (> {days} days)")


def shipment_stats(app: CliApp) -> None:
    stats = app.call(app.coordinator.shipment_stats)
    if stats is FAILED:
        return
    banner("SHIPMENT STATISTICS")
    print(f"  Total shipments: {stats.total_shipments}")
    print()
    for status, count in stats.status_counts.items():
        print(f"    {status.value:<16} {count:>6}")
    print(f"\n  Delayed shipments: {len(stats.delayed_shipments)}")
    print()


def show_shipments_menu(app: CliApp) -> None:
    run_menu("SHIPMENTS", SHIPMENT_MENU, {
        "1": lambda: list_shipments(app),
        "2": lambda: find_by_id(app),
        "3": lambda: search_by_destination(app),
        "4": lambda: filter_by_status(app),
        "5": lambda: add_shipment(app),
        "6": lambda: update_shipment(app),
        "7": lambda: shipment_workflow(app),
        "8": lambda: delete_shipment(app),
        "9": lambda: delayed_shipments(app),
        "10": lambda: shipment_stats(app),
    })
