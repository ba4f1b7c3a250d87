"""
Warehouse Kernel

Inventory, order and shipment management over a single SQLite file:
- Validation before any I/O
- Centralised status-transition tables
- Race-free conditional writes for status and stock changes
- Synchronous and pool-backed asynchronous service calls
"""

__version__ = "0.1.0"
