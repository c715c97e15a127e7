"""Pure domain services."""

from buildstock.core.services.ledger_report import (
    LedgerReport,
    MovementTotals,
    ReportGroup,
    ReportSummary,
    bucket_key,
    build_report,
)
from buildstock.core.services.reconciliation import ReconciliationResult, reconcile

__all__ = [
    "LedgerReport",
    "MovementTotals",
    "ReportGroup",
    "ReportSummary",
    "bucket_key",
    "build_report",
    "ReconciliationResult",
    "reconcile",
]
