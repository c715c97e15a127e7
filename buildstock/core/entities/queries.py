"""
Query objects for ledger reads.

Filters are declared as validated models instead of being assembled field by
field at the call site; the storage layer translates them to SQL.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from buildstock.core.entities.inventory import TransactionType


class StockSort(str, Enum):
    LAST_UPDATED = "last_updated"
    CURRENT_STOCK = "current_stock"
    MATERIAL = "material"
    WAREHOUSE = "warehouse"


class ReportGroupBy(str, Enum):
    DATE = "date"
    MATERIAL = "material"
    WAREHOUSE = "warehouse"
    SUPPLIER = "supplier"
    PROJECT = "project"


class ReportPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PageRequest(BaseModel):
    """1-based pagination."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=1000)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel):
    """Pagination block returned with list results."""

    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


class StockLevelQuery(BaseModel):
    """Filters for listing stock levels."""

    material_id: str | None = None
    warehouse_id: str | None = None
    material_base_id: str | None = None
    low_stock_only: bool = False
    search: str | None = None
    sort: StockSort = StockSort.LAST_UPDATED
    descending: bool = True
    paging: PageRequest = Field(default_factory=PageRequest)


class _DateRange(BaseModel):
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def check_range(self) -> "_DateRange":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class TransactionQuery(_DateRange):
    """Filters for listing ledger transactions, newest first."""

    material_id: str | None = None
    warehouse_id: str | None = None
    supplier_id: str | None = None
    project_id: str | None = None
    type: TransactionType | None = None
    search: str | None = None
    paging: PageRequest = Field(default_factory=PageRequest)


class ReportFilters(_DateRange):
    """Filters applied before report grouping."""

    material_id: str | None = None
    warehouse_id: str | None = None
    supplier_id: str | None = None
    project_id: str | None = None
    type: TransactionType | None = None
