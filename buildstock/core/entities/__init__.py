"""Domain entities."""

from buildstock.core.entities.identity import Caller, UserRole
from buildstock.core.entities.inventory import (
    MaterialTransaction,
    MovementOutcome,
    StockAdjustment,
    StockLevel,
    TransactionType,
)
from buildstock.core.entities.queries import (
    Page,
    PageRequest,
    ReportFilters,
    ReportGroupBy,
    ReportPeriod,
    StockLevelQuery,
    StockSort,
    TransactionQuery,
)
from buildstock.core.entities.reference import (
    Material,
    Project,
    ProjectStatus,
    Supplier,
    Warehouse,
)

__all__ = [
    # Identity
    "Caller",
    "UserRole",
    # Ledger
    "StockLevel",
    "MaterialTransaction",
    "StockAdjustment",
    "TransactionType",
    "MovementOutcome",
    # Queries
    "Page",
    "PageRequest",
    "StockLevelQuery",
    "StockSort",
    "TransactionQuery",
    "ReportFilters",
    "ReportGroupBy",
    "ReportPeriod",
    # Reference data
    "Material",
    "Warehouse",
    "Supplier",
    "Project",
    "ProjectStatus",
]
