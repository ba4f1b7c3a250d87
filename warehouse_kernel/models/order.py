"""ORM persistence for customer orders (``orders`` table)."""

from datetime import date

from sqlalchemy import CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from warehouse_kernel.db.base import TrackedBase
from warehouse_kernel.domain.status import OrderStatus

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in OrderStatus)


class OrderModel(TrackedBase):
    """A row of the ``orders`` table.  Status holds the display string."""

    __tablename__ = "orders"

    __table_args__ = (
        CheckConstraint(f"order_status IN ({_STATUS_VALUES})", name="ck_orders_status"),
        Index("idx_orders_customer", "customer_name"),
        Index("idx_orders_status", "order_status"),
        Index("idx_orders_date", "order_date"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column("order_id", Integer, primary_key=True)

    order_date: Mapped[date] = mapped_column(nullable=False)

    customer_name: Mapped[str] = mapped_column(nullable=False)

    status: Mapped[str] = mapped_column(
        "order_status",
        String(20),
        nullable=False,
        default=OrderStatus.PENDING.value,
    )

    def __repr__(self) -> str:
        return f"<Order {self.id}: {self.customer_name} {self.order_date} ({self.status})>"
