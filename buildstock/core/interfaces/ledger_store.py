"""Abstract interface for inventory ledger storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from buildstock.core.entities.inventory import (
    MaterialTransaction,
    MovementOutcome,
    StockAdjustment,
    StockLevel,
)
from buildstock.core.entities.queries import (
    ReportFilters,
    StockLevelQuery,
    TransactionQuery,
)


class ILedgerStore(ABC):
    """Interface for stock level, transaction and adjustment persistence."""

    @abstractmethod
    async def get_stock_level(self, stock_level_id: str) -> StockLevel | None:
        """Get stock level by ID."""
        pass

    @abstractmethod
    async def find_stock_level(
        self, material_id: str, warehouse_id: str
    ) -> StockLevel | None:
        """Get the stock level of a (material, warehouse) pair."""
        pass

    @abstractmethod
    async def register_stock_level(self, stock_level: StockLevel) -> StockLevel:
        """
        Insert a new stock level without any transaction.

        Raises DuplicateStockLevelError if the pair already has one.
        """
        pass

    @abstractmethod
    async def apply_movement(self, transaction: MaterialTransaction) -> MovementOutcome:
        """
        Append a transaction and update its stock level as one atomic unit.

        The stock read, the sufficiency check for OUT, the transaction insert
        and the stock update are serialized against concurrent writers.
        Raises InsufficientStockError without writing anything when an OUT
        exceeds the stock on hand, and the matching NotFoundError when a
        referenced material, warehouse, supplier or project is missing.
        """
        pass

    @abstractmethod
    async def adjust_stock_level(
        self,
        stock_level_id: str,
        changes: dict[str, Any],
        user_id: str,
        reason: str | None = None,
    ) -> tuple[StockLevel, StockAdjustment]:
        """
        Overwrite stock fields directly and record a StockAdjustment.

        `changes` may hold current_stock, safety_stock and unit_price.
        """
        pass

    @abstractmethod
    async def list_stock_levels(
        self, query: StockLevelQuery
    ) -> tuple[list[StockLevel], int]:
        """List stock levels matching the query. Returns (page rows, total)."""
        pass

    @abstractmethod
    async def list_transactions(
        self, query: TransactionQuery
    ) -> tuple[list[MaterialTransaction], int]:
        """List transactions newest first. Returns (page rows, total)."""
        pass

    @abstractmethod
    async def list_transactions_for_report(
        self, filters: ReportFilters
    ) -> list[MaterialTransaction]:
        """All transactions matching the filters, oldest first."""
        pass

    @abstractmethod
    async def list_stock_transactions(
        self, stock_level_id: str, after_transaction_id: int = 0
    ) -> list[MaterialTransaction]:
        """Transactions of one stock level with id > after_transaction_id."""
        pass

    @abstractmethod
    async def list_adjustments(self, stock_level_id: str) -> list[StockAdjustment]:
        """Manual adjustments of a stock level, newest first."""
        pass

    @abstractmethod
    async def stock_totals(self, warehouse_id: str | None = None) -> dict[str, float]:
        """Counts and sums over stock levels (optionally one warehouse)."""
        pass

    @abstractmethod
    async def movement_totals(
        self, since: datetime, warehouse_id: str | None = None
    ) -> dict[str, float]:
        """Counts and value of IN/OUT transactions created since `since`."""
        pass
