"""Adjust Stock Use Case: audited manual correction outside the ledger."""

from dataclasses import dataclass

from buildstock.application.dto.requests import AdjustStockRequest
from buildstock.application.dto.responses import (
    AdjustmentResponse,
    AdjustStockResponse,
    StockLevelResponse,
)
from buildstock.config import get_logger
from buildstock.core.entities.identity import Caller
from buildstock.core.entities.inventory import StockAdjustment, StockLevel
from buildstock.core.exceptions import (
    StockLevelNotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from buildstock.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)

_ADJUSTABLE = ("current_stock", "safety_stock", "unit_price")
_NOT_NULL = ("current_stock", "safety_stock")


@dataclass
class AdjustStockResult:
    """Result of a manual adjustment."""

    stock_level: StockLevel
    adjustment: StockAdjustment


class AdjustStockUseCase:
    """
    Overwrite current stock, safety stock or unit price directly.

    No transaction is recorded. The adjustment row becomes the new
    reconciliation baseline of the stock level.
    """

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from buildstock.infrastructure.storage.sqlite import get_ledger_store

            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        stock_level_id: str,
        request: AdjustStockRequest,
        caller: Caller,
    ) -> AdjustStockResult:
        """Execute adjust stock use case."""
        if not caller.user_id:
            raise UnauthenticatedError()

        changes = request.model_dump(include=set(_ADJUSTABLE), exclude_unset=True)
        if not changes:
            raise ValidationError(
                "body",
                "nothing to change: set current_stock, safety_stock or unit_price",
            )
        for field, value in changes.items():
            if value is None:
                if field in _NOT_NULL:
                    raise ValidationError(field, "cannot be cleared")
                continue
            if value < 0:
                raise ValidationError(field, "must not be negative", value)

        ledger = await self._get_ledger_store()
        if await ledger.get_stock_level(stock_level_id) is None:
            raise StockLevelNotFoundError(stock_level_id)

        stock_level, adjustment = await ledger.adjust_stock_level(
            stock_level_id,
            changes,
            user_id=caller.user_id,
            reason=request.reason,
        )
        return AdjustStockResult(stock_level=stock_level, adjustment=adjustment)

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        """Convert result to API response."""
        return AdjustStockResponse(
            stock_level=StockLevelResponse.model_validate(result.stock_level),
            adjustment=AdjustmentResponse.model_validate(result.adjustment),
        )
