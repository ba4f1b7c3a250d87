"""
Typed Exception Hierarchy for the Warehouse Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from WarehouseKernelError:

    WarehouseKernelError (base)
    |
    +-- ValidationError
    |
    +-- DuplicateError
    |
    +-- ServiceError
    |   +-- InvalidStatusTransitionError
    |   +-- DeleteNotAllowedError
    |   +-- InsufficientStockError
    |   +-- EntityNotFoundError
    |   +-- ConcurrentModificationError
    |
    +-- StorageError
        +-- DatabaseConnectionError
        +-- TransactionError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|-----------------------------------------
Input        | VALIDATION_ERROR            | Bad shape/range, raised before any I/O
             | DUPLICATE_ENTITY            | Unique constraint (inventory name)
-------------|-----------------------------|-----------------------------------------
Business     | INVALID_STATUS_TRANSITION   | Pair not in the transition table
             | DELETE_NOT_ALLOWED          | Deleting a Delivered order/shipment
             | INSUFFICIENT_STOCK          | Removing more than is on hand
             | ENTITY_NOT_FOUND            | Workflow/stock call on a missing row
             | CONCURRENT_MODIFICATION     | Row changed between read and write
-------------|-----------------------------|-----------------------------------------
Storage      | DATABASE_CONNECTION_FAILED  | Database file cannot be opened
             | TRANSACTION_FAILED          | Work failed and was rolled back

Plain lookups (find_by_id, update, delete) report "not found" as None/False
rather than raising EntityNotFoundError.

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        orders.ship_order(order_id)
    except InvalidStatusTransitionError as e:
        notify_user(f"Order {e.entity_id} is {e.current_status}")
    except ServiceError as e:
        log.error(f"Workflow failed: {e.code}")

Structured attributes survive logging (StructuredFormatter copies them into
``exc_*`` fields); message parsing is never required.
"""

from __future__ import annotations


class WarehouseKernelError(Exception):
    """
    Base exception for all warehouse kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "WAREHOUSE_KERNEL_ERROR"


# Input errors


class ValidationError(WarehouseKernelError):
    """Input failed a shape or range check before touching storage."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class DuplicateError(WarehouseKernelError):
    """A uniqueness constraint would be violated."""

    code: str = "DUPLICATE_ENTITY"

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} {field} already exists: {value}")


# Business rule errors


class ServiceError(WarehouseKernelError):
    """A business rule rejected the operation, or a storage failure was wrapped."""

    code: str = "SERVICE_ERROR"


class InvalidStatusTransitionError(ServiceError):
    """Requested status is not reachable from the persisted status."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: int | None,
        current_status: str,
        requested_status: str,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Invalid status transition from {current_status} to {requested_status}"
        )


class DeleteNotAllowedError(ServiceError):
    """Record is in a status that forbids deletion."""

    code: str = "DELETE_NOT_ALLOWED"

    def __init__(self, entity_type: str, entity_id: int, status: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.status = status
        super().__init__(f"Cannot delete {status.lower()} {entity_type}s")


class InsufficientStockError(ServiceError):
    """Stock removal exceeds the quantity on hand."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: int | None, available: int, requested: int):
        self.item_id = item_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}"
        )


class EntityNotFoundError(ServiceError):
    """A workflow or stock operation referenced a row that does not exist."""

    code: str = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.capitalize()} not found with ID: {entity_id}")


class ConcurrentModificationError(ServiceError):
    """The row changed between the legality check and the conditional write."""

    code: str = "CONCURRENT_MODIFICATION"

    def __init__(self, entity_type: str, entity_id: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Concurrent modification of {entity_type} {entity_id}: "
            "status was changed by another request"
        )


# Storage errors


class StorageError(WarehouseKernelError):
    """Base exception for database failures."""

    code: str = "STORAGE_ERROR"


class DatabaseConnectionError(StorageError):
    """The database file could not be opened."""

    code: str = "DATABASE_CONNECTION_FAILED"

    def __init__(self, database_path: str):
        self.database_path = database_path
        super().__init__(f"Cannot open database: {database_path}")


class TransactionError(StorageError):
    """Transactional work failed and was rolled back."""

    code: str = "TRANSACTION_FAILED"

    def __init__(self, operation: str = "transaction"):
        self.operation = operation
        super().__init__(f"{operation.capitalize()} failed and was rolled back")
