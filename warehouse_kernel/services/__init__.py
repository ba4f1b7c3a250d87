"""Warehouse services and the front-end coordinator."""

from warehouse_kernel.services.base import BaseService, DatedStatusService
from warehouse_kernel.services.coordinator import (
    MainThreadDispatcher,
    WarehouseCoordinator,
    root_cause_message,
)
from warehouse_kernel.services.inventory_service import InventoryService
from warehouse_kernel.services.order_service import OrderService
from warehouse_kernel.services.shipment_service import ShipmentService

__all__ = [
    "BaseService",
    "DatedStatusService",
    "InventoryService",
    "OrderService",
    "ShipmentService",
    "WarehouseCoordinator",
    "MainThreadDispatcher",
    "root_cause_message",
]
