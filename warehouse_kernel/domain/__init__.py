"""
Pure domain layer.

Records, status tables, validation helpers and the clock abstraction, with
NO dependencies on the ORM, the database or any other I/O.
"""

from warehouse_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from warehouse_kernel.domain.entities import (
    InventoryItem,
    InventoryStats,
    Order,
    OrderStats,
    Shipment,
    ShipmentStats,
)
from warehouse_kernel.domain.status import (
    ORDER_TRANSITIONS,
    SHIPMENT_TRANSITIONS,
    OrderStatus,
    ShipmentStatus,
    allowed_transitions,
    can_be_cancelled,
    can_be_tracked,
    can_transition,
    is_terminal,
    require_transition,
)

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "InventoryItem",
    "Order",
    "Shipment",
    "InventoryStats",
    "OrderStats",
    "ShipmentStats",
    "OrderStatus",
    "ShipmentStatus",
    "ORDER_TRANSITIONS",
    "SHIPMENT_TRANSITIONS",
    "allowed_transitions",
    "can_transition",
    "is_terminal",
    "can_be_cancelled",
    "can_be_tracked",
    "require_transition",
]
