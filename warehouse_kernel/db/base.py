"""
Module: warehouse_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
    Provides the type annotation map for consistent column types and the
    TrackedBase mixin for row timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, dao/, services/, or outer layers.

Invariants enforced:
    - Integer autoincrement keys: each model declares its own primary key
      column (item_id, order_id, shipment_id); identities are never reused.
    - Timestamps: TrackedBase sets created_at on INSERT and bumps updated_at
      on every UPDATE, including Core ``update()`` statements.
"""

from datetime import date, datetime
from typing import ClassVar

from sqlalchemy import Date, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - str maps to String(255), the longest text any record accepts.
        - date maps to Date, stored by SQLite as ISO ``YYYY-MM-DD`` text so
          that BETWEEN and ORDER BY compare chronologically.
    """

    type_annotation_map: ClassVar[dict] = {
        str: String(255),
        int: Integer,
        date: Date,
        datetime: DateTime,
    }


class TrackedBase(Base):
    """Abstract base with created/updated timestamps."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
