"""
Service layer for inventory operations.

Validates input before any I/O, delegates persistence to InventoryDAO and
performs stock changes as single atomic conditional updates.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future

from warehouse_kernel.dao.inventory_dao import InventoryDAO
from warehouse_kernel.domain.clock import Clock
from warehouse_kernel.domain.entities import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    InventoryItem,
    InventoryStats,
)
from warehouse_kernel.domain.validation import (
    MAX_QUANTITY,
    require_id,
    require_non_negative_int,
    require_positive_int,
    require_quantity,
)
from warehouse_kernel.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from warehouse_kernel.logging_config import get_logger
from warehouse_kernel.services.base import DEFAULT_WORKER_COUNT, BaseService

logger = get_logger("services.inventory")


class InventoryService(BaseService):
    """
    Service for managing stocked items.

    Handles CRUD, name/location search, low-stock reporting and stock
    movements.  All public methods return InventoryItem records, not ORM rows.
    """

    entity_name = "inventory_item"

    def __init__(
        self,
        dao: InventoryDAO,
        *,
        clock: Clock | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ):
        super().__init__(clock=clock, worker_count=worker_count)
        self._dao = dao
        self.low_stock_threshold = low_stock_threshold

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_item(self, item: InventoryItem) -> InventoryItem:
        """
        Create a new inventory item.

        Args:
            item: Unsaved item; ``id`` is ignored.

        Returns:
            The stored item with its new identity.

        Raises:
            ValidationError: If a field is invalid.
            DuplicateError: If an item with the same name exists.
        """
        if item is None:
            raise ValidationError("item", "Inventory item cannot be null")
        item.validate()
        with self._storage_guard("create inventory item"):
            created = self._dao.create(item)
        logger.info(
            "inventory_item_created",
            extra={
                "item_id": created.id,
                "item_name": created.name,
                "quantity": created.quantity,
            },
        )
        return created

    def update_item(self, item: InventoryItem) -> bool:
        """
        Replace name, quantity and location of an existing item.

        Returns:
            False if the item does not exist.

        Raises:
            ValidationError: If a field or the id is invalid.
            DuplicateError: If the new name belongs to another item.
        """
        if item is None:
            raise ValidationError("item", "Inventory item cannot be null")
        require_id(item.id, "item_id")
        item.validate()
        with self._storage_guard("update inventory item"):
            updated = self._dao.update(item)
        if updated:
            logger.info("inventory_item_updated", extra={"item_id": item.id})
        return updated

    def delete_item(self, item_id: int) -> bool:
        require_id(item_id, "item_id")
        with self._storage_guard("delete inventory item"):
            deleted = self._dao.delete(item_id)
        if deleted:
            logger.info("inventory_item_deleted", extra={"item_id": item_id})
        return deleted

    def find_item(self, item_id: int) -> InventoryItem | None:
        require_id(item_id, "item_id")
        with self._storage_guard("find inventory item"):
            return self._dao.find_by_id(item_id)

    def list_items(self) -> list[InventoryItem]:
        with self._storage_guard("list inventory items"):
            return self._dao.find_all()

    def batch_update(self, items: Iterable[InventoryItem]) -> bool:
        """Update several items in one transaction; nothing is written unless all exist."""
        batch = list(items)
        for item in batch:
            require_id(item.id, "item_id")
            item.validate()
        with self._storage_guard("batch update inventory items"):
            updated = self._dao.update_many(batch)
        logger.info(
            "inventory_batch_updated",
            extra={"count": len(batch), "applied": updated},
        )
        return updated

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_by_name(self, text: str) -> list[InventoryItem]:
        """Case-insensitive substring search; blank text lists everything."""
        if text is None or not text.strip():
            return self.list_items()
        with self._storage_guard("search inventory by name"):
            return self._dao.find_by_name(text.strip())

    def search_by_location(self, text: str) -> list[InventoryItem]:
        if text is None or not text.strip():
            return self.list_items()
        with self._storage_guard("search inventory by location"):
            return self._dao.find_by_location(text.strip())

    def low_stock_items(self, threshold: int | None = None) -> list[InventoryItem]:
        """Items at or below ``threshold`` (default: configured threshold)."""
        if threshold is None:
            threshold = self.low_stock_threshold
        require_non_negative_int(threshold, "threshold")
        with self._storage_guard("find low stock items"):
            return self._dao.find_low_stock(threshold)

    # ------------------------------------------------------------------
    # Stock movements
    # ------------------------------------------------------------------

    def set_quantity(self, item_id: int, quantity: int) -> InventoryItem:
        """
        Set the absolute quantity of an item.

        Raises:
            ValidationError: If ``quantity`` is negative, above MAX_QUANTITY
                or not an int.
            EntityNotFoundError: If the item does not exist.
        """
        require_id(item_id, "item_id")
        require_quantity(quantity)
        with self._storage_guard("update inventory quantity"):
            updated = self._dao.update_quantity(item_id, quantity)
        if not updated:
            raise EntityNotFoundError("inventory item", item_id)
        logger.info(
            "inventory_quantity_set",
            extra={"item_id": item_id, "quantity": quantity},
        )
        return self._reload(item_id)

    def add_stock(self, item_id: int, quantity: int) -> InventoryItem:
        """
        Increase stock by ``quantity``.

        Raises:
            ValidationError: If ``quantity`` is not positive, or the new
                quantity would exceed MAX_QUANTITY (stock is unchanged).
            EntityNotFoundError: If the item does not exist.
        """
        require_id(item_id, "item_id")
        require_positive_int(quantity, "quantity")
        require_quantity(quantity)
        with self._storage_guard("add stock"):
            applied = self._dao.adjust_quantity(item_id, quantity)
        if not applied:
            current = self.find_item(item_id)
            if current is None:
                raise EntityNotFoundError("inventory item", item_id)
            logger.warning(
                "stock_addition_rejected",
                extra={
                    "item_id": item_id,
                    "available": current.quantity,
                    "requested": quantity,
                },
            )
            raise ValidationError(
                "quantity",
                f"Quantity cannot exceed {MAX_QUANTITY}: "
                f"{current.quantity} on hand, {quantity} added",
            )
        logger.info("stock_added", extra={"item_id": item_id, "delta": quantity})
        return self._reload(item_id)

    def remove_stock(self, item_id: int, quantity: int) -> InventoryItem:
        """
        Decrease stock by ``quantity``.  The quantity is unchanged on failure.

        Raises:
            ValidationError: If ``quantity`` is not positive.
            InsufficientStockError: If ``quantity`` exceeds the stock on hand.
            EntityNotFoundError: If the item does not exist.
        """
        require_id(item_id, "item_id")
        require_positive_int(quantity, "quantity")
        with self._storage_guard("remove stock"):
            # Nothing above MAX_QUANTITY can be on hand.
            applied = quantity <= MAX_QUANTITY and self._dao.adjust_quantity(
                item_id, -quantity
            )
        if not applied:
            current = self.find_item(item_id)
            if current is None:
                raise EntityNotFoundError("inventory item", item_id)
            logger.warning(
                "stock_removal_rejected",
                extra={
                    "item_id": item_id,
                    "available": current.quantity,
                    "requested": quantity,
                },
            )
            raise InsufficientStockError(item_id, current.quantity, quantity)
        logger.info("stock_removed", extra={"item_id": item_id, "delta": -quantity})
        return self._reload(item_id)

    def _reload(self, item_id: int) -> InventoryItem:
        item = self.find_item(item_id)
        if item is None:
            raise EntityNotFoundError("inventory item", item_id)
        return item

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_stats(self) -> InventoryStats:
        with self._storage_guard("compute inventory statistics"):
            return InventoryStats(
                total_items=self._dao.count(),
                total_quantity=self._dao.total_quantity(),
                low_stock_items=tuple(self._dao.find_low_stock(self.low_stock_threshold)),
            )

    # ------------------------------------------------------------------
    # Asynchronous calling convention
    # ------------------------------------------------------------------

    def create_item_async(self, item: InventoryItem) -> Future[InventoryItem]:
        return self.submit(self.create_item, item)

    def update_item_async(self, item: InventoryItem) -> Future[bool]:
        return self.submit(self.update_item, item)

    def delete_item_async(self, item_id: int) -> Future[bool]:
        return self.submit(self.delete_item, item_id)

    def find_item_async(self, item_id: int) -> Future[InventoryItem | None]:
        return self.submit(self.find_item, item_id)

    def list_items_async(self) -> Future[list[InventoryItem]]:
        return self.submit(self.list_items)

    def batch_update_async(self, items: Iterable[InventoryItem]) -> Future[bool]:
        return self.submit(self.batch_update, list(items))

    def search_by_name_async(self, text: str) -> Future[list[InventoryItem]]:
        return self.submit(self.search_by_name, text)

    def search_by_location_async(self, text: str) -> Future[list[InventoryItem]]:
        return self.submit(self.search_by_location, text)

    def low_stock_items_async(
        self, threshold: int | None = None
    ) -> Future[list[InventoryItem]]:
        return self.submit(self.low_stock_items, threshold)

    def set_quantity_async(self, item_id: int, quantity: int) -> Future[InventoryItem]:
        return self.submit(self.set_quantity, item_id, quantity)

    def add_stock_async(self, item_id: int, quantity: int) -> Future[InventoryItem]:
        return self.submit(self.add_stock, item_id, quantity)

    def remove_stock_async(self, item_id: int, quantity: int) -> Future[InventoryItem]:
        return self.submit(self.remove_stock, item_id, quantity)

    def get_stats_async(self) -> Future[InventoryStats]:
        return self.submit(self.get_stats)
