"""
Module: warehouse_kernel.db.engine
Responsibility: The ``Database`` persistence gateway: SQLite engine
    construction, per-connection pragmas, session factory, transactional
    scope utilities and lazy schema creation.  This is the single point of
    database connection configuration for the entire system.
Architecture position: Kernel > DB.  May import from db/base.py and models/.
    MUST NOT import from dao/, services/, or outer layers.

Invariants enforced:
    - One explicitly constructed ``Database`` per database file, injected into
      every DAO.  There is no module-level engine.
    - Every connection runs with foreign_keys=ON, journal_mode=WAL,
      synchronous=NORMAL and the configured busy timeout.
    - SQL lower() is Python's str.lower(), so case-insensitive searches fold
      non-ASCII letters on both sides of the comparison.
    - run_transaction() is atomic: commit on success, rollback on any failure,
      session always closed.
    - Schema creation happens at most once per instance and is thread-safe.

Failure modes:
    - DatabaseConnectionError if the database file cannot be opened.
    - TransactionError wrapping any non-domain exception raised inside a
      transaction (the original exception is chained as ``__cause__``).
    - Domain errors (WarehouseKernelError) raised by the work callable pass
      through unchanged after rollback.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import create_engine, event, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from warehouse_kernel.exceptions import (
    DatabaseConnectionError,
    StorageError,
    TransactionError,
    WarehouseKernelError,
)
from warehouse_kernel.logging_config import get_logger

if TYPE_CHECKING:
    from warehouse_config import WarehouseSettings

logger = get_logger("db.engine")

T = TypeVar("T")

MEMORY_PATH = ":memory:"


@dataclass(frozen=True)
class DatabaseStats:
    """Row counts per table."""

    database_path: str
    inventory_count: int
    order_count: int
    shipment_count: int

    @property
    def total_records(self) -> int:
        return self.inventory_count + self.order_count + self.shipment_count


def _fold_case(value):
    return value.lower() if isinstance(value, str) else value


class Database:
    """
    Persistence gateway over a single SQLite database file.

    Contract:
        ``run_transaction(work)`` and ``run_query(work)`` hand ``work`` a fresh
        Session and return whatever it returns.  Sessions are never shared
        between calls or threads.

    Non-goals:
        ``":memory:"`` shares one connection across threads via StaticPool
        and is intended for scratch use only.
    """

    def __init__(
        self,
        path: str = "warehouse.db",
        *,
        busy_timeout_ms: int = 5000,
        echo: bool = False,
    ):
        self.path = str(path)
        self.busy_timeout_ms = busy_timeout_ms
        self._engine = self._create_engine(echo)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self._schema_ready = False
        self._schema_lock = threading.Lock()

        logger.info(
            "database_initialized",
            extra={
                "database_path": self.path,
                "busy_timeout_ms": busy_timeout_ms,
                "echo": echo,
            },
        )

    @classmethod
    def from_settings(cls, settings: WarehouseSettings) -> Database:
        return cls(settings.database_path, busy_timeout_ms=settings.busy_timeout_ms)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def is_memory(self) -> bool:
        return self.path == MEMORY_PATH

    def _create_engine(self, echo: bool) -> Engine:
        kwargs: dict = {
            "echo": echo,
            "connect_args": {
                "timeout": self.busy_timeout_ms / 1000,
                "check_same_thread": False,
            },
        }
        if self.is_memory:
            kwargs["poolclass"] = StaticPool

        engine = create_engine(f"sqlite:///{self.path}", **kwargs)
        event.listen(engine, "connect", self._apply_pragmas)
        return engine

    def _apply_pragmas(self, dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={int(self.busy_timeout_ms)}")
            if not self.is_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
        finally:
            cursor.close()
        # lower() folds Unicode case the same way str.lower() does.
        dbapi_connection.create_function("lower", 1, _fold_case, deterministic=True)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """
        Create the inventory, orders and shipments tables and their indexes
        if absent.  Idempotent and thread-safe.

        Raises:
            DatabaseConnectionError: If the database file cannot be opened.
        """
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return

            from warehouse_kernel.db.base import Base
            import warehouse_kernel.models  # noqa: F401  registers tables

            try:
                Base.metadata.create_all(self._engine)
            except OperationalError as exc:
                logger.error(
                    "schema_creation_failed",
                    extra={"database_path": self.path},
                    exc_info=True,
                )
                raise DatabaseConnectionError(self.path) from exc

            self._schema_ready = True
            logger.info("schema_ready", extra={"database_path": self.path})

    def drop_schema(self) -> None:
        """Drop all tables. Use with caution - primarily for testing."""
        from warehouse_kernel.db.base import Base
        import warehouse_kernel.models  # noqa: F401

        with self._schema_lock:
            Base.metadata.drop_all(self._engine)
            self._schema_ready = False
        logger.warning("schema_dropped", extra={"database_path": self.path})

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def connect(self) -> Session:
        """
        Open a new session with a live connection.

        Raises:
            DatabaseConnectionError: If the database file cannot be opened.
        """
        self.ensure_schema()
        session = self._session_factory()
        try:
            session.connection()
        except OperationalError as exc:
            session.close()
            raise DatabaseConnectionError(self.path) from exc
        return session

    @contextmanager
    def session_scope(self, commit: bool = True) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Postconditions: On normal exit, the session is committed (when
            ``commit`` is True) and closed.  On exception, the session is
            rolled back and closed, and the exception is re-raised.

        Usage:
            with db.session_scope() as session:
                session.add(model)
        """
        session = self.connect()
        logger.debug("transaction_started")
        try:
            yield session
            if commit:
                session.commit()
                logger.debug("transaction_committed")
        except Exception:
            session.rollback()
            logger.warning("transaction_rolled_back", exc_info=True)
            raise
        finally:
            session.close()

    def run_transaction(
        self,
        work: Callable[[Session], T],
        *,
        operation: str = "transaction",
    ) -> T:
        """
        Run ``work(session)`` atomically and return its result.

        Raises:
            WarehouseKernelError: Any domain error raised by ``work``, unchanged.
            TransactionError: Any other failure, with the cause chained.
        """
        try:
            with self.session_scope() as session:
                return work(session)
        except WarehouseKernelError:
            raise
        except Exception as exc:
            raise TransactionError(operation) from exc

    def run_query(
        self,
        work: Callable[[Session], T],
        *,
        operation: str = "query",
    ) -> T:
        """Run read-only ``work(session)``; never commits."""
        try:
            with self.session_scope(commit=False) as session:
                return work(session)
        except WarehouseKernelError:
            raise
        except Exception as exc:
            raise TransactionError(operation) from exc

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def test_connection(self) -> bool:
        """Return True if the database can be opened and queried."""
        try:
            self.run_query(lambda s: s.execute(text("SELECT 1")).scalar_one())
        except (StorageError, SQLAlchemyError):
            logger.warning(
                "connection_test_failed",
                extra={"database_path": self.path},
                exc_info=True,
            )
            return False
        return True

    def get_stats(self) -> DatabaseStats:
        from warehouse_kernel.models import InventoryItemModel, OrderModel, ShipmentModel

        def _count(session: Session) -> DatabaseStats:
            def count(model) -> int:
                return session.execute(
                    select(func.count()).select_from(model)
                ).scalar_one()

            return DatabaseStats(
                database_path=self.path,
                inventory_count=count(InventoryItemModel),
                order_count=count(OrderModel),
                shipment_count=count(ShipmentModel),
            )

        return self.run_query(_count, operation="database stats")

    def dispose(self) -> None:
        """Release all pooled connections."""
        self._engine.dispose()
        logger.debug("database_disposed", extra={"database_path": self.path})
