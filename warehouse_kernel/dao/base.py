"""
Module: warehouse_kernel.dao.base
Responsibility: Shared data-access behaviour for the three record tables:
    CRUD by integer identity, full listing, counting, all-or-nothing batch
    update, and (for dated status records) status/date/pattern queries and
    the conditional status update.
Architecture position: Kernel > DAO.  May import from db/, models/ and
    domain/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Every statement is a parameterised SQLAlchemy construct; user text is
      never interpolated into SQL.  LIKE wildcards in search input are
      escaped.
    - Results leave this layer as domain entities, never ORM instances.
    - Each public call runs in its own session obtained from the injected
      Database (no shared sessions between calls or threads).

Failure modes:
    - DuplicateError when a subclass maps a unique-constraint violation.
    - TransactionError (from Database) for any other storage failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warehouse_kernel.db.base import Base
from warehouse_kernel.db.engine import Database
from warehouse_kernel.domain.status import OrderStatus, ShipmentStatus
from warehouse_kernel.logging_config import get_logger

logger = get_logger("dao")

ModelType = TypeVar("ModelType", bound=Base)
EntityType = TypeVar("EntityType")
T = TypeVar("T")


class BaseDAO(ABC, Generic[ModelType, EntityType]):
    """
    Abstract base class for all data-access components.

    Contract:
        Subclasses set ``model`` and ``entity_name`` and implement the
        ORM-to-entity conversion plus the mapping of mutable fields to
        column values.

    Non-goals:
        - Does NOT validate entities; services do that before calling.
        - Does NOT check status-transition legality.
    """

    model: type[ModelType]
    entity_name: str

    def __init__(self, db: Database):
        self.db = db

    @abstractmethod
    def _to_entity(self, row: ModelType) -> EntityType:
        """Convert an ORM row to its domain entity."""

    @abstractmethod
    def _values(self, entity: EntityType) -> dict[str, Any]:
        """Mutable fields of ``entity`` keyed by mapped attribute name."""

    def _ordering(self) -> tuple:
        return (self.model.id,)

    def _integrity_error(self, entity: EntityType, exc: IntegrityError) -> Exception:
        """Translate a constraint violation; default leaves it to the gateway."""
        return exc

    def _guarded(self, entity: EntityType, action: Callable[[], T]) -> T:
        try:
            return action()
        except IntegrityError as exc:
            translated = self._integrity_error(entity, exc)
            if translated is exc:
                raise
            logger.debug(
                "constraint_violation_translated",
                extra={"constraint_error": str(exc.orig), "error_code": translated.code},
            )
            # The translated error is the complete user-facing story.
            raise translated from None

    def _update_stmt(self, entity: EntityType):
        return (
            update(self.model)
            .where(self.model.id == entity.id)
            .values(**self._values(entity))
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with identity and timestamps populated."""

        def work(session: Session) -> EntityType:
            row = self.model(**self._values(entity))
            session.add(row)
            self._guarded(entity, session.flush)
            session.refresh(row)
            return self._to_entity(row)

        created = self.db.run_transaction(work, operation=f"create {self.entity_name}")
        logger.debug(
            f"{self.entity_name}_row_inserted",
            extra={"entity_id": created.id},
        )
        return created

    def update(self, entity: EntityType) -> bool:
        """Replace the mutable fields of the row with ``entity.id``.

        Returns:
            False if no such row exists.
        """
        stmt = self._update_stmt(entity)

        def work(session: Session) -> bool:
            return self._guarded(entity, lambda: session.execute(stmt)).rowcount == 1

        return self.db.run_transaction(work, operation=f"update {self.entity_name}")

    def delete(self, entity_id: int) -> bool:
        stmt = delete(self.model).where(self.model.id == entity_id)
        return self._delete(stmt)

    def _delete(self, stmt) -> bool:
        return self.db.run_transaction(
            lambda s: s.execute(stmt).rowcount == 1,
            operation=f"delete {self.entity_name}",
        )

    def update_many(self, entities: Iterable[EntityType]) -> bool:
        """
        Update every entity in one transaction.

        Returns:
            True iff every row was affected.  If any row is missing, nothing
            is written.
        """
        batch = list(entities)

        def work(session: Session) -> bool:
            for entity in batch:
                stmt = self._update_stmt(entity)
                result = self._guarded(entity, lambda: session.execute(stmt))
                if result.rowcount != 1:
                    session.rollback()
                    return False
            return True

        return self.db.run_transaction(
            work, operation=f"batch update {self.entity_name}"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_id(self, entity_id: int) -> EntityType | None:
        def work(session: Session) -> EntityType | None:
            row = session.get(self.model, entity_id)
            return self._to_entity(row) if row is not None else None

        return self.db.run_query(work, operation=f"find {self.entity_name}")

    def find_all(self) -> list[EntityType]:
        return self._select(select(self.model).order_by(*self._ordering()))

    def count(self) -> int:
        return self.db.run_query(
            lambda s: s.execute(select(func.count()).select_from(self.model)).scalar_one(),
            operation=f"count {self.entity_name}",
        )

    def _select(self, stmt) -> list[EntityType]:
        def work(session: Session) -> list[EntityType]:
            return [self._to_entity(row) for row in session.scalars(stmt)]

        return self.db.run_query(work, operation=f"query {self.entity_name}")

    def _matching(self, column, pattern: str) -> list[EntityType]:
        """Case-insensitive substring match on ``column``."""
        stmt = (
            select(self.model)
            .where(func.lower(column).contains(pattern.lower(), autoescape=True))
            .order_by(*self._ordering())
        )
        return self._select(stmt)


class DatedStatusDAO(BaseDAO[ModelType, EntityType]):
    """
    Base for records that carry a business date and a workflow status.

    Listings are ordered by date descending, then identity descending.
    """

    status_type: type[OrderStatus] | type[ShipmentStatus]

    @property
    @abstractmethod
    def _date_column(self):
        """Mapped attribute holding the business date."""

    def _ordering(self) -> tuple:
        return (self._date_column.desc(), self.model.id.desc())

    def update(
        self,
        entity: EntityType,
        expected: OrderStatus | ShipmentStatus | None = None,
    ) -> bool:
        """Full replace, optionally only while the persisted status is ``expected``."""
        stmt = self._update_stmt(entity)
        if expected is not None:
            stmt = stmt.where(self.model.status == expected.value)

        def work(session: Session) -> bool:
            return self._guarded(entity, lambda: session.execute(stmt)).rowcount == 1

        return self.db.run_transaction(work, operation=f"update {self.entity_name}")

    def delete(
        self,
        entity_id: int,
        expected: OrderStatus | ShipmentStatus | None = None,
    ) -> bool:
        stmt = delete(self.model).where(self.model.id == entity_id)
        if expected is not None:
            stmt = stmt.where(self.model.status == expected.value)
        return self._delete(stmt)

    def find_by_status(self, status: OrderStatus | ShipmentStatus) -> list[EntityType]:
        stmt = (
            select(self.model)
            .where(self.model.status == status.value)
            .order_by(*self._ordering())
        )
        return self._select(stmt)

    def find_by_date_range(self, start: date, end: date) -> list[EntityType]:
        """Records dated within ``[start, end]`` inclusive."""
        stmt = (
            select(self.model)
            .where(self._date_column.between(start, end))
            .order_by(*self._ordering())
        )
        return self._select(stmt)

    def find_recent(self, since: date, limit: int) -> list[EntityType]:
        stmt = (
            select(self.model)
            .where(self._date_column >= since)
            .order_by(*self._ordering())
            .limit(limit)
        )
        return self._select(stmt)

    def status_counts(self) -> dict:
        """Count per status; every status is present, zero-filled."""

        def work(session: Session) -> dict:
            rows = session.execute(
                select(self.model.status, func.count()).group_by(self.model.status)
            ).all()
            counts = {status: 0 for status in self.status_type}
            for value, n in rows:
                counts[self.status_type(value)] = n
            return counts

        return self.db.run_query(work, operation=f"count {self.entity_name} statuses")

    def update_status(
        self,
        entity_id: int,
        status: OrderStatus | ShipmentStatus,
        expected: OrderStatus | ShipmentStatus | None = None,
    ) -> bool:
        """
        Narrow status-only update.

        When ``expected`` is given the row is only written if its persisted
        status still equals ``expected``; callers compare the result to
        detect a concurrent change.

        Returns:
            True iff a row was written.
        """

        def work(session: Session) -> bool:
            stmt = update(self.model).where(self.model.id == entity_id)
            if expected is not None:
                stmt = stmt.where(self.model.status == expected.value)
            stmt = stmt.values(status=status.value)
            return session.execute(stmt).rowcount == 1

        return self.db.run_transaction(
            work, operation=f"update {self.entity_name} status"
        )
