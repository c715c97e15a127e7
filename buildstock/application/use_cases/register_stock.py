"""Register Stock Use Case: initial stock level without a transaction."""

from buildstock.application.dto.requests import RegisterStockRequest
from buildstock.application.dto.responses import StockLevelResponse
from buildstock.config import get_logger
from buildstock.core.entities.inventory import StockLevel
from buildstock.core.exceptions import (
    DuplicateStockLevelError,
    MaterialNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.interfaces.reference_store import IReferenceStore

logger = get_logger(__name__)


class RegisterStockUseCase:
    """
    Register the opening stock of a (material, warehouse) pair.

    The registered current_stock becomes the reconciliation baseline.
    """

    def __init__(
        self,
        ledger_store: ILedgerStore | None = None,
        reference_store: IReferenceStore | None = None,
    ):
        self._ledger_store = ledger_store
        self._reference_store = reference_store

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

    async def execute(self, request: RegisterStockRequest) -> StockLevel:
        """Execute register stock use case."""
        if request.current_stock < 0:
            raise ValidationError("current_stock", "must not be negative", request.current_stock)
        if request.safety_stock < 0:
            raise ValidationError("safety_stock", "must not be negative", request.safety_stock)

        ref_store = await self._get_reference_store()
        if await ref_store.get_material(request.material_id) is None:
            raise MaterialNotFoundError(request.material_id)
        if await ref_store.get_warehouse(request.warehouse_id) is None:
            raise WarehouseNotFoundError(request.warehouse_id)

        ledger = await self._get_ledger_store()
        existing = await ledger.find_stock_level(request.material_id, request.warehouse_id)
        if existing is not None:
            raise DuplicateStockLevelError(
                request.material_id, request.warehouse_id, existing_id=existing.id
            )

        # The unique constraint still guards a registration racing this check
        return await ledger.register_stock_level(
            StockLevel(
                material_id=request.material_id,
                warehouse_id=request.warehouse_id,
                current_stock=request.current_stock,
                safety_stock=request.safety_stock,
                unit_price=request.unit_price,
            )
        )

    def to_response(self, stock_level: StockLevel) -> StockLevelResponse:
        """Convert result to API response."""
        return StockLevelResponse.model_validate(stock_level)
