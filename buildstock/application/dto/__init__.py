"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from buildstock.application.dto.requests import (
    AdjustStockRequest,
    CreateMaterialRequest,
    CreateProjectRequest,
    CreateSupplierRequest,
    CreateWarehouseRequest,
    RecordMovementRequest,
    RegisterStockRequest,
    UpdateMaterialRequest,
    UpdateSupplierRequest,
    UpdateWarehouseRequest,
)
from buildstock.application.dto.responses import (
    AdjustmentResponse,
    AdjustStockResponse,
    ErrorResponse,
    HealthResponse,
    MaterialListResponse,
    MaterialResponse,
    MovementResponse,
    PaginationResponse,
    ProjectListResponse,
    ProjectResponse,
    ReconciliationResponse,
    ReportResponse,
    StockLevelListResponse,
    StockLevelResponse,
    StockSummaryResponse,
    SupplierListResponse,
    SupplierResponse,
    TransactionListResponse,
    TransactionResponse,
    WarehouseListResponse,
    WarehouseResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CreateMaterialRequest",
    "CreateProjectRequest",
    "CreateSupplierRequest",
    "CreateWarehouseRequest",
    "RecordMovementRequest",
    "RegisterStockRequest",
    "UpdateMaterialRequest",
    "UpdateSupplierRequest",
    "UpdateWarehouseRequest",
    # Responses
    "AdjustmentResponse",
    "AdjustStockResponse",
    "ErrorResponse",
    "HealthResponse",
    "MaterialListResponse",
    "MaterialResponse",
    "MovementResponse",
    "PaginationResponse",
    "ProjectListResponse",
    "ProjectResponse",
    "ReconciliationResponse",
    "ReportResponse",
    "StockLevelListResponse",
    "StockLevelResponse",
    "StockSummaryResponse",
    "SupplierListResponse",
    "SupplierResponse",
    "TransactionListResponse",
    "TransactionResponse",
    "WarehouseListResponse",
    "WarehouseResponse",
]
