"""
Data access for inventory items.

Uniqueness of item names is left to the ``uq_inventory_item_name``
constraint; the violation surfaces as DuplicateError.  Stock changes are a
single conditional UPDATE so concurrent movements cannot drive a quantity
below zero or above MAX_QUANTITY.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warehouse_kernel.dao.base import BaseDAO
from warehouse_kernel.domain.entities import InventoryItem
from warehouse_kernel.domain.validation import MAX_QUANTITY
from warehouse_kernel.exceptions import DuplicateError
from warehouse_kernel.models.inventory import InventoryItemModel


class InventoryDAO(BaseDAO[InventoryItemModel, InventoryItem]):
    """Data-access component for the ``inventory`` table.  Ordered by name."""

    model = InventoryItemModel
    entity_name = "inventory_item"

    def _to_entity(self, row: InventoryItemModel) -> InventoryItem:
        return InventoryItem(
            id=row.id,
            name=row.name,
            quantity=row.quantity,
            location=row.location,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _values(self, entity: InventoryItem) -> dict[str, Any]:
        return {
            "name": entity.name,
            "quantity": entity.quantity,
            "location": entity.location,
        }

    def _ordering(self) -> tuple:
        return (InventoryItemModel.name, InventoryItemModel.id)

    def _integrity_error(self, entity: InventoryItem, exc: IntegrityError) -> Exception:
        if "UNIQUE" in str(exc.orig).upper():
            return DuplicateError("Inventory item", "name", entity.name)
        return exc

    def find_by_name(self, pattern: str) -> list[InventoryItem]:
        return self._matching(InventoryItemModel.name, pattern)

    def find_by_location(self, pattern: str) -> list[InventoryItem]:
        return self._matching(InventoryItemModel.location, pattern)

    def find_low_stock(self, threshold: int) -> list[InventoryItem]:
        """Items with ``quantity <= threshold``, lowest first."""
        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.quantity <= threshold)
            .order_by(InventoryItemModel.quantity, InventoryItemModel.name)
        )
        return self._select(stmt)

    def update_quantity(self, item_id: int, quantity: int) -> bool:
        """Narrow absolute quantity update.  Caller has validated ``quantity``."""

        def work(session: Session) -> bool:
            stmt = (
                update(InventoryItemModel)
                .where(InventoryItemModel.id == item_id)
                .values(quantity=quantity)
            )
            return session.execute(stmt).rowcount == 1

        return self.db.run_transaction(work, operation="update inventory quantity")

    def adjust_quantity(self, item_id: int, delta: int) -> bool:
        """
        Atomically add ``delta`` (may be negative) to the quantity.

        Returns:
            False if the item does not exist or the result would fall outside
            ``[0, MAX_QUANTITY]``; the row is unchanged in that case.
        """

        def work(session: Session) -> bool:
            stmt = (
                update(InventoryItemModel)
                .where(
                    InventoryItemModel.id == item_id,
                    InventoryItemModel.quantity + delta >= 0,
                    InventoryItemModel.quantity <= MAX_QUANTITY - delta,
                )
                .values(quantity=InventoryItemModel.quantity + delta)
                .execution_options(synchronize_session=False)
            )
            return session.execute(stmt).rowcount == 1

        return self.db.run_transaction(work, operation="adjust inventory quantity")

    def total_quantity(self) -> int:
        return self.db.run_query(
            lambda s: s.execute(
                select(func.coalesce(func.sum(InventoryItemModel.quantity), 0))
            ).scalar_one(),
            operation="sum inventory quantity",
        )
