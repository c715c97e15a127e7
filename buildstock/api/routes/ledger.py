"""Inventory ledger endpoints: movements, stock levels, reports."""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from buildstock.api.dependencies import (
    get_adjust_stock_use_case,
    get_generate_report_use_case,
    get_ledger,
    get_page_request,
    get_reconcile_stock_use_case,
    get_record_movement_use_case,
    get_register_stock_use_case,
    get_stock_summary_use_case,
)
from buildstock.api.security import get_current_caller
from buildstock.application.dto.requests import (
    AdjustStockRequest,
    RecordMovementRequest,
    RegisterStockRequest,
)
from buildstock.application.dto.responses import (
    AdjustmentResponse,
    AdjustStockResponse,
    ErrorResponse,
    MovementResponse,
    PaginationResponse,
    ReconciliationResponse,
    ReportResponse,
    StockLevelListResponse,
    StockLevelResponse,
    StockSummaryResponse,
    TransactionListResponse,
    TransactionResponse,
)
from buildstock.application.use_cases import (
    AdjustStockUseCase,
    GenerateReportUseCase,
    ReconcileStockUseCase,
    RecordMovementUseCase,
    RegisterStockUseCase,
    StockSummaryUseCase,
)
from buildstock.core.entities.identity import Caller
from buildstock.core.entities.inventory import TransactionType
from buildstock.core.entities.queries import (
    PageRequest,
    ReportFilters,
    ReportGroupBy,
    ReportPeriod,
    StockLevelQuery,
    StockSort,
    TransactionQuery,
)
from buildstock.core.exceptions import StockLevelNotFoundError
from buildstock.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(
    prefix="/api/ledger",
    tags=["ledger"],
    dependencies=[Depends(get_current_caller)],
    responses={401: {"model": ErrorResponse}},
)


# --- Movements ---


@router.post(
    "/movements",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_movement(
    request: RecordMovementRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> MovementResponse:
    """Record an IN or OUT movement and update the stock level."""
    result = await use_case.execute(request, caller)
    return use_case.to_response(result)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    material_id: str | None = None,
    warehouse_id: str | None = None,
    supplier_id: str | None = None,
    project_id: str | None = None,
    type: TransactionType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> TransactionListResponse:
    """List ledger transactions, newest first."""
    query = TransactionQuery(
        material_id=material_id,
        warehouse_id=warehouse_id,
        supplier_id=supplier_id,
        project_id=project_id,
        type=type,
        start_date=start_date,
        end_date=end_date,
        search=search,
        paging=paging,
    )
    transactions, total = await store.list_transactions(query)
    return TransactionListResponse(
        items=[TransactionResponse.model_validate(tx) for tx in transactions],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/transactions/report",
    response_model=ReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def transactions_report(
    group_by: ReportGroupBy = ReportGroupBy.DATE,
    period: ReportPeriod = ReportPeriod.DAILY,
    start_date: date | None = None,
    end_date: date | None = None,
    material_id: str | None = None,
    warehouse_id: str | None = None,
    supplier_id: str | None = None,
    project_id: str | None = None,
    type: TransactionType | None = None,
    use_case: GenerateReportUseCase = Depends(get_generate_report_use_case),
) -> ReportResponse:
    """Grouped IN/OUT totals; defaults to the last 30 days."""
    filters = ReportFilters(
        start_date=start_date,
        end_date=end_date,
        material_id=material_id,
        warehouse_id=warehouse_id,
        supplier_id=supplier_id,
        project_id=project_id,
        type=type,
    )
    result = await use_case.execute(filters, group_by=group_by, period=period)
    return use_case.to_response(result)


# --- Stock levels ---


@router.post(
    "/stock",
    response_model=StockLevelResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def register_stock(
    request: RegisterStockRequest,
    use_case: RegisterStockUseCase = Depends(get_register_stock_use_case),
) -> StockLevelResponse:
    """Register the opening stock of a material in a warehouse."""
    stock_level = await use_case.execute(request)
    return use_case.to_response(stock_level)


@router.get("/stock", response_model=StockLevelListResponse)
async def list_stock(
    material_id: str | None = None,
    warehouse_id: str | None = None,
    material_base_id: str | None = None,
    low_stock_only: bool = False,
    search: str | None = None,
    sort: StockSort = StockSort.LAST_UPDATED,
    order: Literal["asc", "desc"] = "desc",
    paging: PageRequest = Depends(get_page_request),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> StockLevelListResponse:
    """List stock levels with derived flags."""
    query = StockLevelQuery(
        material_id=material_id,
        warehouse_id=warehouse_id,
        material_base_id=material_base_id,
        low_stock_only=low_stock_only,
        search=search,
        sort=sort,
        descending=order == "desc",
        paging=paging,
    )
    stock_levels, total = await store.list_stock_levels(query)
    return StockLevelListResponse(
        items=[StockLevelResponse.model_validate(s) for s in stock_levels],
        pagination=PaginationResponse.for_page(paging, total),
    )


@router.get(
    "/stock/summary",
    response_model=StockSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def stock_summary(
    warehouse_id: str | None = None,
    period_days: int | None = Query(default=None, ge=1, le=3650),
    use_case: StockSummaryUseCase = Depends(get_stock_summary_use_case),
) -> StockSummaryResponse:
    """Stock counts, value and recent movement totals."""
    return await use_case.execute(warehouse_id=warehouse_id, period_days=period_days)


@router.get(
    "/stock/{stock_level_id}",
    response_model=StockLevelResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stock(
    stock_level_id: str,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> StockLevelResponse:
    """Get one stock level."""
    stock_level = await store.get_stock_level(stock_level_id)
    if stock_level is None:
        raise StockLevelNotFoundError(stock_level_id)
    return StockLevelResponse.model_validate(stock_level)


@router.put(
    "/stock/{stock_level_id}",
    response_model=AdjustStockResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    stock_level_id: str,
    request: AdjustStockRequest,
    caller: Caller = Depends(get_current_caller),
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Manually correct a stock level; the correction is audited, not ledgered."""
    result = await use_case.execute(stock_level_id, request, caller)
    return use_case.to_response(result)


@router.get(
    "/stock/{stock_level_id}/adjustments",
    response_model=list[AdjustmentResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_adjustments(
    stock_level_id: str,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> list[AdjustmentResponse]:
    """Manual adjustments of a stock level, newest first."""
    if await store.get_stock_level(stock_level_id) is None:
        raise StockLevelNotFoundError(stock_level_id)
    adjustments = await store.list_adjustments(stock_level_id)
    return [AdjustmentResponse.model_validate(a) for a in adjustments]


@router.get(
    "/stock/{stock_level_id}/reconcile",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_stock(
    stock_level_id: str,
    use_case: ReconcileStockUseCase = Depends(get_reconcile_stock_use_case),
) -> ReconciliationResponse:
    """Compare current stock with baseline plus ledger movements."""
    result = await use_case.execute(stock_level_id)
    return use_case.to_response(result)
