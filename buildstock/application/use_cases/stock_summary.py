"""Stock Summary Use Case: inventory counts and recent movement totals."""

from datetime import UTC, datetime, timedelta

from buildstock.application.dto.responses import StockSummaryResponse
from buildstock.config import Settings, get_logger, get_settings
from buildstock.core.exceptions import ValidationError, WarehouseNotFoundError
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.interfaces.reference_store import IReferenceStore

logger = get_logger(__name__)


class StockSummaryUseCase:
    """Summarize stock levels, optionally for one warehouse."""

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        reference_store: IReferenceStore | None = None,
        settings: Settings | None = None,
    ):
        self._ledger_store = ledger_store
        self._reference_store = reference_store
        self._settings = settings

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from buildstock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def _get_reference_store(self) -> IReferenceStore:
        if self._reference_store is None:
            from buildstock.infrastructure.storage.sqlite import get_reference_store

            self._reference_store = await get_reference_store()
        return self._reference_store

    async def execute(
        self,
        warehouse_id: str | None = None,
        period_days: int | None = None,
    ) -> StockSummaryResponse:
        """Execute stock summary use case."""
        if period_days is None:
            period_days = (self._settings or get_settings()).ledger.summary_period_days
        if period_days < 1:
            raise ValidationError("period_days", "must be at least 1", period_days)

        if warehouse_id:
            ref_store = await self._get_reference_store()
            if await ref_store.get_warehouse(warehouse_id) is None:
                raise WarehouseNotFoundError(warehouse_id)

        ledger = await self._get_ledger_store()
        stock = await ledger.stock_totals(warehouse_id)
        since = datetime.now(UTC) - timedelta(days=period_days)
        movements = await ledger.movement_totals(since, warehouse_id)

        logger.debug("stock_summary_computed", warehouse_id=warehouse_id, **stock)

        return StockSummaryResponse(
            warehouse_id=warehouse_id,
            period_days=period_days,
            stock_levels=int(stock["stock_levels"]),
            low_stock=int(stock["low_stock"]),
            out_of_stock=int(stock["out_of_stock"]),
            total_units=int(stock["total_units"]),
            total_value=stock["total_value"],
            in_count=int(movements["in_count"]),
            out_count=int(movements["out_count"]),
            in_value=movements["in_value"],
            out_value=movements["out_value"],
        )
