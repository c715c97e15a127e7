"""Reconcile Stock Use Case: compare a stock level with its ledger history."""

from buildstock.application.dto.responses import ReconciliationResponse
from buildstock.config import get_logger
from buildstock.core.exceptions import StockLevelNotFoundError
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.services.reconciliation import ReconciliationResult, reconcile

logger = get_logger(__name__)


class ReconcileStockUseCase:
    """Check current_stock against baseline plus signed transactions since it."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from buildstock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(self, stock_level_id: str) -> ReconciliationResult:
        """Execute reconcile use case."""
        ledger = await self._get_ledger_store()
        stock_level = await ledger.get_stock_level(stock_level_id)
        if stock_level is None:
            raise StockLevelNotFoundError(stock_level_id)

        adjustments = await ledger.list_adjustments(stock_level_id)
        latest = adjustments[0] if adjustments else None
        after_id = latest.after_transaction_id if latest else 0
        transactions = await ledger.list_stock_transactions(stock_level_id, after_id)

        result = reconcile(stock_level, transactions, latest_adjustment=latest)
        if not result.consistent:
            logger.warning(
                "stock_reconciliation_mismatch",
                stock_level_id=stock_level_id,
                expected_stock=result.expected_stock,
                actual_stock=result.actual_stock,
                discrepancy=result.discrepancy,
            )
        return result

    def to_response(self, result: ReconciliationResult) -> ReconciliationResponse:
        """Convert result to API response."""
        return ReconciliationResponse.model_validate(result)
