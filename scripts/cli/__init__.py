"""
Interactive warehouse CLI.

Manage inventory, orders and shipments from a numbered console menu.  Every
operation goes through the WarehouseCoordinator, so the CLI exercises the
same asynchronous path as any other front end.

Entry point: ``warehouse-cli`` or ``python -m scripts.cli``
"""

from scripts.cli.main import main

__all__ = ["main"]
