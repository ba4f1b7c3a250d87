"""Data-access components, one per record table."""

from warehouse_kernel.dao.inventory_dao import InventoryDAO
from warehouse_kernel.dao.order_dao import OrderDAO
from warehouse_kernel.dao.shipment_dao import ShipmentDAO

__all__ = [
    "InventoryDAO",
    "OrderDAO",
    "ShipmentDAO",
]
