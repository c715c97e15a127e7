"""
Domain exceptions for the BuildStock ledger.

Every error carries a machine-readable code so that clients can tell an
insufficient-stock rejection apart from a missing record or a conflict.
"""

from typing import Any


class BuildStockError(Exception):
    """Base exception for all BuildStock errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Identity
class UnauthenticatedError(BuildStockError):
    """No valid caller identity on the request."""

    def __init__(self, reason: str = "Caller identity is required"):
        super().__init__(reason, code="UNAUTHENTICATED")


# Storage Exceptions
class StorageError(BuildStockError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Not found
class NotFoundError(BuildStockError):
    """Referenced record does not exist."""

    entity = "record"

    def __init__(self, record_id: Any):
        super().__init__(
            f"{self.entity.replace('_', ' ').capitalize()} not found: {record_id}",
            code=f"{self.entity.upper()}_NOT_FOUND",
            details={f"{self.entity}_id": record_id},
        )


class MaterialNotFoundError(NotFoundError):
    entity = "material"


class WarehouseNotFoundError(NotFoundError):
    entity = "warehouse"


class SupplierNotFoundError(NotFoundError):
    entity = "supplier"


class ProjectNotFoundError(NotFoundError):
    entity = "project"


class StockLevelNotFoundError(NotFoundError):
    entity = "stock_level"


# Ledger
class InsufficientStockError(BuildStockError):
    """OUT movement exceeds the stock on hand."""

    def __init__(
        self,
        material_id: str,
        warehouse_id: str,
        requested: int,
        available: int,
    ):
        super().__init__(
            f"Insufficient stock for material {material_id} in warehouse "
            f"{warehouse_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "warehouse_id": warehouse_id,
                "requested": requested,
                "available": available,
            },
        )


# Conflicts
class ConflictError(BuildStockError):
    """Write collides with existing state."""

    def __init__(self, message: str, code: str = "CONFLICT", details: dict | None = None):
        super().__init__(message, code=code, details=details)


class DuplicateStockLevelError(ConflictError):
    """A stock level already exists for the (material, warehouse) pair."""

    def __init__(self, material_id: str, warehouse_id: str, existing_id: str | None = None):
        super().__init__(
            f"Stock already registered for material {material_id} "
            f"in warehouse {warehouse_id}",
            code="DUPLICATE_STOCK_LEVEL",
            details={
                "material_id": material_id,
                "warehouse_id": warehouse_id,
                "existing_id": existing_id,
            },
        )


class DuplicateCodeError(ConflictError):
    """Unique code already taken."""

    def __init__(self, entity: str, code_value: str):
        super().__init__(
            f"{entity.capitalize()} code already exists: {code_value}",
            code="DUPLICATE_CODE",
            details={"entity": entity, "code": code_value},
        )


class ConcurrencyConflictError(ConflictError):
    """Stock level changed underneath the current write."""

    def __init__(self, stock_level_id: str, expected_version: int):
        super().__init__(
            f"Stock level {stock_level_id} was modified concurrently",
            code="CONCURRENCY_CONFLICT",
            details={
                "stock_level_id": stock_level_id,
                "expected_version": expected_version,
            },
        )


class DependentRecordsExistError(BuildStockError):
    """Deletion blocked by referencing records."""

    def __init__(self, entity: str, record_id: str, dependents: dict[str, int]):
        summary = ", ".join(f"{count} {name}" for name, count in dependents.items())
        super().__init__(
            f"Cannot delete {entity} {record_id}: referenced by {summary}",
            code="DEPENDENT_RECORDS_EXIST",
            details={"entity": entity, "id": record_id, "dependents": dependents},
        )


# Validation Exceptions
class ValidationError(BuildStockError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class ConfigurationError(BuildStockError):
    """Configuration error."""

    pass
