"""Response DTOs for API endpoints.

Entity-backed responses are built with `model_validate(entity)`; derived
properties of the entity (is_low_stock, stock_value, ...) are read as
attributes and serialized like stored fields.
"""

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from buildstock.core.entities.inventory import TransactionType
from buildstock.core.entities.queries import Page, PageRequest, ReportGroupBy, ReportPeriod
from buildstock.core.entities.reference import ProjectStatus


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | dict[str, Any] | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PaginationResponse(BaseModel):
    """Pagination block of list responses."""

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def for_page(cls, paging: PageRequest, total: int) -> "PaginationResponse":
        page = Page(page=paging.page, limit=paging.limit, total=total)
        return cls(page=page.page, limit=page.limit, total=total, total_pages=page.total_pages)


# --- Ledger ---


class StockLevelResponse(BaseModel):
    """Stock level with derived flags."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    material_id: str
    warehouse_id: str
    current_stock: int
    safety_stock: int
    unit_price: float | None = None
    initial_stock: int
    version: int
    is_low_stock: bool
    is_out_of_stock: bool
    stock_value: float
    shortage: int
    last_updated: datetime
    created_at: datetime


class StockLevelListResponse(BaseModel):
    """Paginated list of stock levels."""

    items: list[StockLevelResponse]
    pagination: PaginationResponse


class TransactionResponse(BaseModel):
    """Ledger transaction."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: TransactionType
    material_id: str
    warehouse_id: str
    stock_level_id: str | None = None
    quantity: int
    unit_price: float | None = None
    total_price: float | None = None
    supplier_id: str | None = None
    project_id: str | None = None
    user_id: str
    notes: str | None = None
    created_at: datetime


class TransactionListResponse(BaseModel):
    """Paginated list of transactions, newest first."""

    items: list[TransactionResponse]
    pagination: PaginationResponse


class MovementResponse(BaseModel):
    """Response for a recorded movement."""

    transaction: TransactionResponse
    stock_level: StockLevelResponse
    created: bool = False  # True if the movement created the stock level


class AdjustmentResponse(BaseModel):
    """Audit entry of a manual stock correction."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_level_id: str
    user_id: str
    previous_current_stock: int
    new_current_stock: int
    stock_delta: int
    previous_safety_stock: int
    new_safety_stock: int
    previous_unit_price: float | None = None
    new_unit_price: float | None = None
    reason: str | None = None
    after_transaction_id: int
    created_at: datetime


class AdjustStockResponse(BaseModel):
    """Response for a manual stock correction."""

    stock_level: StockLevelResponse
    adjustment: AdjustmentResponse


class ReconciliationResponse(BaseModel):
    """Expected versus actual stock of one stock level."""

    model_config = ConfigDict(from_attributes=True)

    stock_level_id: str
    baseline: int
    baseline_source: str
    after_transaction_id: int
    transaction_count: int
    net_movement: int
    expected_stock: int
    actual_stock: int
    consistent: bool
    discrepancy: int


class ReportGroupResponse(BaseModel):
    """One group of the movement report."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    in_quantity: int
    out_quantity: int
    net_quantity: int
    in_value: float
    out_value: float
    net_value: float
    in_count: int
    out_count: int
    total_transactions: int
    average_unit_price: float | None = None


class ReportSummaryResponse(BaseModel):
    """Totals across all filtered transactions."""

    total_transactions: int
    in_count: int
    out_count: int
    in_quantity: int
    out_quantity: int
    net_quantity: int
    total_quantity: int
    in_value: float
    out_value: float
    net_value: float
    total_value: float


class ReportFiltersResponse(BaseModel):
    """Effective report filters, defaults applied."""

    start_date: date | None = None
    end_date: date | None = None
    material_id: str | None = None
    warehouse_id: str | None = None
    supplier_id: str | None = None
    project_id: str | None = None
    type: TransactionType | None = None


class ReportResponse(BaseModel):
    """Grouped movement report."""

    group_by: ReportGroupBy
    period: ReportPeriod
    filters: ReportFiltersResponse
    groups: list[ReportGroupResponse]
    summary: ReportSummaryResponse


class StockSummaryResponse(BaseModel):
    """Stock and recent movement totals."""

    warehouse_id: str | None = None
    period_days: int
    stock_levels: int
    low_stock: int
    out_of_stock: int
    total_units: int
    total_value: float
    in_count: int
    out_count: int
    in_value: float
    out_value: float


# --- Reference data ---


class WarehouseResponse(BaseModel):
    """Warehouse response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    location: str | None = None
    purpose: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class WarehouseListResponse(BaseModel):
    items: list[WarehouseResponse]
    pagination: PaginationResponse


class MaterialResponse(BaseModel):
    """Material variant response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    material_base_id: str
    code: str
    name: str
    category: str | None = None
    unit: str | None = None
    color_id: str | None = None
    size: str | None = None
    finish_type: str | None = None
    unit_price: float | None = None
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MaterialListResponse(BaseModel):
    items: list[MaterialResponse]
    pagination: PaginationResponse


class SupplierResponse(BaseModel):
    """Supplier response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    supplier_type: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SupplierListResponse(BaseModel):
    items: list[SupplierResponse]
    pagination: PaginationResponse


class ProjectResponse(BaseModel):
    """Project response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    items: list[ProjectResponse]
    pagination: PaginationResponse


# --- Health ---


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None
