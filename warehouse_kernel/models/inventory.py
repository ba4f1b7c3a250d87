"""
Module: warehouse_kernel.models.inventory
Responsibility: ORM persistence for stocked items.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - item_name is unique (uq_inventory_item_name).  The DAO maps the
      constraint violation to DuplicateError instead of pre-checking.
    - item_quantity >= 0 (ck_inventory_quantity_non_negative), which also
      backstops the conditional stock update.
    - item_quantity <= 2147483647 (ck_inventory_quantity_max) keeps the
      column an INTEGER; SQLite would otherwise spill overflow into REAL.

Failure modes:
    - IntegrityError on duplicate name or out-of-range quantity.
"""

from sqlalchemy import CheckConstraint, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from warehouse_kernel.db.base import TrackedBase


class InventoryItemModel(TrackedBase):
    """A row of the ``inventory`` table."""

    __tablename__ = "inventory"

    __table_args__ = (
        UniqueConstraint("item_name", name="uq_inventory_item_name"),
        CheckConstraint("item_quantity >= 0", name="ck_inventory_quantity_non_negative"),
        CheckConstraint("item_quantity <= 2147483647", name="ck_inventory_quantity_max"),
        Index("idx_inventory_name", "item_name"),
        Index("idx_inventory_location", "item_location"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column("item_id", Integer, primary_key=True)

    name: Mapped[str] = mapped_column("item_name", nullable=False)

    quantity: Mapped[int] = mapped_column(
        "item_quantity",
        nullable=False,
        default=0,
    )

    location: Mapped[str] = mapped_column("item_location", nullable=False)

    def __repr__(self) -> str:
        return f"<InventoryItem {self.id}: {self.name} x{self.quantity} @ {self.location}>"
