"""ORM models.  Importing this package registers every table on Base.metadata."""

from warehouse_kernel.models.inventory import InventoryItemModel
from warehouse_kernel.models.order import OrderModel
from warehouse_kernel.models.shipment import ShipmentModel

__all__ = [
    "InventoryItemModel",
    "OrderModel",
    "ShipmentModel",
]
