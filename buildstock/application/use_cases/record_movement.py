"""Record Movement Use Case: IN or OUT ledger entry with stock update."""

from dataclasses import dataclass

from buildstock.application.dto.requests import RecordMovementRequest
from buildstock.application.dto.responses import (
    MovementResponse,
    StockLevelResponse,
    TransactionResponse,
)
from buildstock.config import get_logger
from buildstock.core.entities.identity import Caller
from buildstock.core.entities.inventory import (
    MaterialTransaction,
    StockLevel,
    TransactionType,
)
from buildstock.core.exceptions import (
    MaterialNotFoundError,
    ProjectNotFoundError,
    SupplierNotFoundError,
    UnauthenticatedError,
    ValidationError,
    WarehouseNotFoundError,
)
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.core.interfaces.reference_store import IReferenceStore

logger = get_logger(__name__)


@dataclass
class RecordMovementResult:
    """Result of recording a movement."""

    transaction: MaterialTransaction
    stock_level: StockLevel
    created: bool = False  # True if the IN created the stock level


class RecordMovementUseCase:
    """Record an IN or OUT movement and move the stock level with it."""

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

    async def execute(
        self, request: RecordMovementRequest, caller: Caller
    ) -> RecordMovementResult:
        """Execute record movement use case."""
        if not caller.user_id:
            raise UnauthenticatedError()
        if request.quantity <= 0:
            raise ValidationError("quantity", "must be a positive integer", request.quantity)

        # Suppliers deliver; an OUT never carries one
        supplier_id = request.supplier_id if request.type is TransactionType.IN else None

        logger.info(
            "record_movement_started",
            type=request.type.value,
            material_id=request.material_id,
            warehouse_id=request.warehouse_id,
            quantity=request.quantity,
            user_id=caller.user_id,
            role=caller.role.value,
        )

        # 1. Validate references
        ref_store = await self._get_reference_store()
        if await ref_store.get_material(request.material_id) is None:
            raise MaterialNotFoundError(request.material_id)
        if await ref_store.get_warehouse(request.warehouse_id) is None:
            raise WarehouseNotFoundError(request.warehouse_id)
        if supplier_id and await ref_store.get_supplier(supplier_id) is None:
            raise SupplierNotFoundError(supplier_id)
        if request.project_id and await ref_store.get_project(request.project_id) is None:
            raise ProjectNotFoundError(request.project_id)

        # 2. Append transaction and update stock atomically
        transaction = MaterialTransaction(
            type=request.type,
            material_id=request.material_id,
            warehouse_id=request.warehouse_id,
            quantity=request.quantity,
            unit_price=request.unit_price,
            total_price=request.total_price,
            supplier_id=supplier_id,
            project_id=request.project_id,
            user_id=caller.user_id,
            notes=request.notes,
        )
        ledger = await self._get_ledger_store()
        outcome = await ledger.apply_movement(transaction)

        logger.info(
            "record_movement_complete",
            transaction_id=outcome.transaction.id,
            stock_level_id=outcome.stock_level.id,
            current_stock=outcome.stock_level.current_stock,
        )

        return RecordMovementResult(
            transaction=outcome.transaction,
            stock_level=outcome.stock_level,
            created=outcome.created,
        )

    def to_response(self, result: RecordMovementResult) -> MovementResponse:
        """Convert result to API response."""
        return MovementResponse(
            transaction=TransactionResponse.model_validate(result.transaction),
            stock_level=StockLevelResponse.model_validate(result.stock_level),
            created=result.created,
        )
