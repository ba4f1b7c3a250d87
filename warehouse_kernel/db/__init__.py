"""Database layer - gateway, base classes."""

from warehouse_kernel.db.base import Base, TrackedBase
from warehouse_kernel.db.engine import Database, DatabaseStats

__all__ = [
    "Database",
    "DatabaseStats",
    "Base",
    "TrackedBase",
]
