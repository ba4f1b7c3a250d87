"""
BaseService -- abstract base for the warehouse services.

Responsibility:
    Provides the worker pool, the injected clock, the asynchronous calling
    convention and storage-error translation shared by every service.
    ``DatedStatusService`` adds the read / check / conditional-write status
    workflow used by orders and shipments.

Architecture position:
    Kernel > Services -- imperative shell over the DAO layer.  Validation and
    transition legality live here; persistence lives in dao/.

Invariants enforced:
    - Every public operation ``op`` has an ``op_async`` twin that runs ``op``
      on the service's own fixed-size pool and resolves (or rejects) with
      exactly what the synchronous call returns (or raises).
    - LogContext fields set by the caller are visible on the pool thread.
    - A status change is written only if the persisted status still equals
      the status the legality check was made against.

Failure modes:
    - ServiceError wrapping StorageError, naming the failed operation.
    - ConcurrentModificationError when the conditional write loses a race.
    - EntityNotFoundError when a workflow call references a missing row.
"""

from __future__ import annotations

import contextvars
from abc import ABC
from collections.abc import Callable, Generator, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from datetime import date
from typing import Any, Generic, TypeVar

from warehouse_kernel.dao.base import DatedStatusDAO
from warehouse_kernel.domain.clock import Clock, SystemClock
from warehouse_kernel.domain.status import (
    OrderStatus,
    ShipmentStatus,
    require_transition,
)
from warehouse_kernel.domain.validation import (
    days_before,
    require_date_range,
    require_id,
    require_positive_int,
)
from warehouse_kernel.exceptions import (
    ConcurrentModificationError,
    DeleteNotAllowedError,
    EntityNotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)
from warehouse_kernel.logging_config import LogContext, get_logger

logger = get_logger("services")

T = TypeVar("T")
EntityType = TypeVar("EntityType")

DEFAULT_WORKER_COUNT = 5


class BaseService(ABC):
    """
    Abstract base class for all warehouse services.

    Contract:
        Owns a ThreadPoolExecutor of ``worker_count`` threads for the
        lifetime of the service.  Call ``shutdown()`` to release it.
    """

    entity_name: str = "record"

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
    ):
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")
        self.clock = clock or SystemClock()
        self._executor = ThreadPoolExecutor(
            max_workers=worker_count,
            thread_name_prefix=f"{self.entity_name}-service",
        )

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """Run ``fn`` on the pool inside a copy of the caller's context."""
        ctx = contextvars.copy_context()
        return self._executor.submit(ctx.run, fn, *args, **kwargs)

    @contextmanager
    def _storage_guard(self, operation: str) -> Generator[None, None, None]:
        """Re-raise StorageError as ServiceError("Failed to <operation>")."""
        try:
            yield
        except StorageError as exc:
            logger.error(
                "storage_operation_failed",
                extra={"operation": operation, "entity": self.entity_name},
                exc_info=True,
            )
            raise ServiceError(f"Failed to {operation}") from exc

    def _today(self) -> date:
        return self.clock.today()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release the pool threads."""
        self._executor.shutdown(wait=wait)
        logger.debug("service_shutdown", extra={"entity": self.entity_name})


class DatedStatusService(BaseService, Generic[EntityType]):
    """Shared workflow for records with a business date and a status."""

    status_type: type[OrderStatus] | type[ShipmentStatus]

    def __init__(
        self,
        dao: DatedStatusDAO,
        *,
        clock: Clock | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
        recent_window_days: int = 7,
        recent_limit: int = 10,
    ):
        super().__init__(clock=clock, worker_count=worker_count)
        self._dao = dao
        self.recent_window_days = recent_window_days
        self.recent_limit = recent_limit

    def _parse_status(self, status: Any):
        if isinstance(status, self.status_type):
            return status
        if isinstance(status, str):
            return self.status_type.from_string(status)
        raise ValidationError("status", f"Invalid {self.entity_name} status: {status!r}")

    def _find(self, entity_id: int) -> EntityType | None:
        require_id(entity_id, f"{self.entity_name}_id")
        with self._storage_guard(f"find {self.entity_name}"):
            return self._dao.find_by_id(entity_id)

    def _require(self, entity_id: int) -> EntityType:
        found = self._find(entity_id)
        if found is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return found

    def _create(self, entity: EntityType) -> EntityType:
        with self._storage_guard(f"create {self.entity_name}"):
            created = self._dao.create(entity)
        logger.info(
            f"{self.entity_name}_created",
            extra={"entity_id": created.id, "status": created.status},
        )
        return created

    def _update(self, entity: EntityType) -> bool:
        """
        Full replace.  An unchanged status is kept; a changed status must be
        a legal transition from the persisted one.

        Returns:
            False if the record does not exist.
        """
        require_id(entity.id, f"{self.entity_name}_id")
        current = self._find(entity.id)
        if current is None:
            return False
        if entity.status != current.status:
            require_transition(
                current.status, entity.status, self.entity_name, entity.id,
            )
        with self._storage_guard(f"update {self.entity_name}"):
            written = self._dao.update(entity, expected=current.status)
        if not written:
            self._raise_lost_race(entity.id, missing_ok=True)
            return False
        logger.info(f"{self.entity_name}_updated", extra={"entity_id": entity.id})
        return True

    def _delete(self, entity_id: int, protected: Any) -> bool:
        current = self._find(entity_id)
        if current is None:
            return False
        if current.status == protected:
            raise DeleteNotAllowedError(self.entity_name, entity_id, protected.value)
        with self._storage_guard(f"delete {self.entity_name}"):
            deleted = self._dao.delete(entity_id, expected=current.status)
        if not deleted:
            self._raise_lost_race(entity_id, missing_ok=True)
            return False
        logger.info(f"{self.entity_name}_deleted", extra={"entity_id": entity_id})
        return True

    def _change_status(self, entity_id: int, target: Any) -> EntityType:
        """
        Move a record to ``target``.

        Reads the persisted status, checks the transition table, then writes
        conditionally on the status that was read.

        Raises:
            EntityNotFoundError: No such record.
            InvalidStatusTransitionError: ``current -> target`` is not legal.
            ConcurrentModificationError: The status changed after it was read.
        """
        target = self._parse_status(target)
        with LogContext.bind(
            operation=f"{self.entity_name}_status_change",
            entity_type=self.entity_name,
            entity_id=str(entity_id),
        ):
            current = self._require(entity_id)
            require_transition(current.status, target, self.entity_name, entity_id)

            with self._storage_guard(f"update {self.entity_name} status"):
                written = self._dao.update_status(
                    entity_id, target, expected=current.status,
                )
            if not written:
                self._raise_lost_race(entity_id)

            logger.info(
                f"{self.entity_name}_status_changed",
                extra={
                    "from_status": current.status,
                    "to_status": target,
                },
            )
            current.status = target
            return self._find(entity_id) or current

    def _raise_lost_race(self, entity_id: int, missing_ok: bool = False) -> None:
        """Classify a conditional write that touched no row."""
        if self._find(entity_id) is None:
            if missing_ok:
                return
            raise EntityNotFoundError(self.entity_name, entity_id)
        logger.warning(
            "concurrent_modification_detected",
            extra={"entity": self.entity_name, "entity_id": entity_id},
        )
        raise ConcurrentModificationError(self.entity_name, entity_id)

    def _list(self) -> list[EntityType]:
        with self._storage_guard(f"list {self.entity_name}s"):
            return self._dao.find_all()

    def _by_status(self, status: Any) -> list[EntityType]:
        status = self._parse_status(status)
        with self._storage_guard(f"find {self.entity_name}s by status"):
            return self._dao.find_by_status(status)

    def _by_date_range(self, start: date, end: date) -> list[EntityType]:
        require_date_range(start, end)
        with self._storage_guard(f"find {self.entity_name}s by date range"):
            return self._dao.find_by_date_range(start, end)

    def _recent(self, days: int | None, limit: int | None) -> list[EntityType]:
        days = self.recent_window_days if days is None else days
        limit = self.recent_limit if limit is None else limit
        since = days_before(self._today(), days, "days")
        require_positive_int(limit, "limit")
        with self._storage_guard(f"find recent {self.entity_name}s"):
            return self._dao.find_recent(since, limit)

    def _status_counts(self) -> dict:
        with self._storage_guard(f"count {self.entity_name} statuses"):
            return self._dao.status_counts()

    def _count(self) -> int:
        with self._storage_guard(f"count {self.entity_name}s"):
            return self._dao.count()

    def _batch_update(self, entities: Iterable[EntityType], validate) -> bool:
        """Validate every entity and its status change, then write all or nothing."""
        batch = list(entities)
        for entity in batch:
            require_id(entity.id, f"{self.entity_name}_id")
            validate(entity)
            current = self._find(entity.id)
            if current is None:
                return False
            if entity.status != current.status:
                require_transition(
                    current.status, entity.status, self.entity_name, entity.id,
                )
        with self._storage_guard(f"batch update {self.entity_name}s"):
            updated = self._dao.update_many(batch)
        logger.info(
            f"{self.entity_name}_batch_updated",
            extra={"count": len(batch), "applied": updated},
        )
        return updated
