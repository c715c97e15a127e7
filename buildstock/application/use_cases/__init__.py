"""Application use cases.

Each use case takes its stores through the constructor (for tests) or
resolves the SQLite singletons lazily.
"""

from buildstock.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from buildstock.application.use_cases.generate_report import (
    GenerateReportResult,
    GenerateReportUseCase,
)
from buildstock.application.use_cases.reconcile_stock import ReconcileStockUseCase
from buildstock.application.use_cases.record_movement import (
    RecordMovementResult,
    RecordMovementUseCase,
)
from buildstock.application.use_cases.register_stock import RegisterStockUseCase
from buildstock.application.use_cases.stock_summary import StockSummaryUseCase

__all__ = [
    "AdjustStockResult",
    "AdjustStockUseCase",
    "GenerateReportResult",
    "GenerateReportUseCase",
    "ReconcileStockUseCase",
    "RecordMovementResult",
    "RecordMovementUseCase",
    "RegisterStockUseCase",
    "StockSummaryUseCase",
]
