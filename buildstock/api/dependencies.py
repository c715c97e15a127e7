"""
Dependency injection container for FastAPI.

Provides stores and use case instances to route handlers.
"""

from fastapi import Query

from buildstock.application.use_cases import (
    AdjustStockUseCase,
    GenerateReportUseCase,
    ReconcileStockUseCase,
    RecordMovementUseCase,
    RegisterStockUseCase,
    StockSummaryUseCase,
)
from buildstock.config import get_settings
from buildstock.core.entities.queries import PageRequest
from buildstock.infrastructure.storage.sqlite import (
    SQLiteLedgerStore,
    SQLiteReferenceStore,
    get_ledger_store,
    get_reference_store,
)


# Store dependencies
async def get_ledger() -> SQLiteLedgerStore:
    """Get ledger store."""
    return await get_ledger_store()


async def get_references() -> SQLiteReferenceStore:
    """Get reference data store."""
    return await get_reference_store()


# Pagination
def get_page_request(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int | None = Query(default=None, ge=1, description="Rows per page"),
) -> PageRequest:
    """Page request with the configured default and maximum page size."""
    ledger_settings = get_settings().ledger
    limit = min(limit or ledger_settings.default_page_size, ledger_settings.max_page_size)
    return PageRequest(page=page, limit=limit)


# Use case dependencies
def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase()


def get_register_stock_use_case() -> RegisterStockUseCase:
    """Get register stock use case."""
    return RegisterStockUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


def get_generate_report_use_case() -> GenerateReportUseCase:
    """Get generate report use case."""
    return GenerateReportUseCase()


def get_reconcile_stock_use_case() -> ReconcileStockUseCase:
    """Get reconcile stock use case."""
    return ReconcileStockUseCase()


def get_stock_summary_use_case() -> StockSummaryUseCase:
    """Get stock summary use case."""
    return StockSummaryUseCase()
