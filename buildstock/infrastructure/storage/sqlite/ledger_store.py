"""
SQLite implementation of the inventory ledger.

Every write that reads a stock level before changing it runs inside
BEGIN IMMEDIATE, so the read, the sufficiency check, the transaction insert
and the stock update form one serialized unit. The stock update is also
guarded by the row version.
"""

import uuid
from datetime import UTC, date, datetime, timedelta
from typing import Any

import aiosqlite

from buildstock.config import get_logger
from buildstock.core.entities.inventory import (
    MaterialTransaction,
    MovementOutcome,
    StockAdjustment,
    StockLevel,
    TransactionType,
)
from buildstock.core.entities.queries import (
    ReportFilters,
    StockLevelQuery,
    StockSort,
    TransactionQuery,
)
from buildstock.core.exceptions import (
    ConcurrencyConflictError,
    DatabaseError,
    DuplicateStockLevelError,
    InsufficientStockError,
    MaterialNotFoundError,
    ProjectNotFoundError,
    StockLevelNotFoundError,
    SupplierNotFoundError,
    WarehouseNotFoundError,
)
from buildstock.core.interfaces.ledger_store import ILedgerStore
from buildstock.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_STOCK_SORT_COLUMNS = {
    StockSort.LAST_UPDATED: "s.last_updated",
    StockSort.CURRENT_STOCK: "s.current_stock",
    StockSort.MATERIAL: "m.name",
    StockSort.WAREHOUSE: "w.name",
}


def _generate_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


def _like(term: str) -> str:
    return f"%{term.strip()}%"


def _date_bounds(
    start_date: date | None, end_date: date | None
) -> tuple[list[str], list[Any]]:
    """created_at bounds for an inclusive day range over ISO timestamps."""
    clauses: list[str] = []
    params: list[Any] = []
    if start_date:
        clauses.append("t.created_at >= ?")
        params.append(start_date.isoformat())
    if end_date:
        clauses.append("t.created_at < ?")
        params.append((end_date + timedelta(days=1)).isoformat())
    return clauses, params


def _transaction_filters(
    filters: TransactionQuery | ReportFilters,
) -> tuple[list[str], list[Any]]:
    clauses, params = _date_bounds(filters.start_date, filters.end_date)
    for column in ("material_id", "warehouse_id", "supplier_id", "project_id"):
        value = getattr(filters, column)
        if value:
            clauses.append(f"t.{column} = ?")
            params.append(value)
    if filters.type:
        clauses.append("t.type = ?")
        params.append(filters.type.value)
    return clauses, params


def _where(clauses: list[str]) -> str:
    return f"WHERE {' AND '.join(clauses)}" if clauses else ""


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of stock level, transaction and adjustment storage."""

    # ------------------------------------------------------------------
    # Stock levels
    # ------------------------------------------------------------------

    async def get_stock_level(self, stock_level_id: str) -> StockLevel | None:
        """Get stock level by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_levels WHERE id = ?", (stock_level_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_stock_level(row)

    async def find_stock_level(
        self, material_id: str, warehouse_id: str
    ) -> StockLevel | None:
        """Get the stock level of a (material, warehouse) pair."""
        async with get_connection() as conn:
            row = await self._fetch_pair(conn, material_id, warehouse_id)
            if row is None:
                return None
            return self._row_to_stock_level(row)

    async def register_stock_level(self, stock_level: StockLevel) -> StockLevel:
        """Insert a stock level with its registration values as baseline."""
        if not stock_level.id:
            stock_level.id = _generate_id()
        now = datetime.now(UTC)
        stock_level.initial_stock = stock_level.current_stock
        stock_level.version = 0
        stock_level.created_at = now
        stock_level.last_updated = now

        try:
            async with get_transaction(immediate=True) as conn:
                existing = await self._fetch_pair(
                    conn, stock_level.material_id, stock_level.warehouse_id
                )
                if existing is not None:
                    raise DuplicateStockLevelError(
                        stock_level.material_id,
                        stock_level.warehouse_id,
                        existing_id=existing["id"],
                    )
                await self._insert_stock_level(conn, stock_level)
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateStockLevelError(
                    stock_level.material_id, stock_level.warehouse_id
                ) from e
            raise DatabaseError("register_stock_level", str(e)) from e
        except aiosqlite.Error as e:
            raise DatabaseError("register_stock_level", str(e)) from e

        logger.info(
            "stock_registered",
            stock_level_id=stock_level.id,
            material_id=stock_level.material_id,
            warehouse_id=stock_level.warehouse_id,
            current_stock=stock_level.current_stock,
        )
        return stock_level

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    async def apply_movement(self, transaction: MaterialTransaction) -> MovementOutcome:
        """Append a transaction and move its stock level in one write lock."""
        now = datetime.now(UTC)
        transaction.created_at = now
        created = False

        try:
            async with get_transaction(immediate=True) as conn:
                await self._check_references(conn, transaction)
                row = await self._fetch_pair(
                    conn, transaction.material_id, transaction.warehouse_id
                )

                if transaction.type is TransactionType.OUT:
                    available = row["current_stock"] if row is not None else 0
                    if row is None or available < transaction.quantity:
                        raise InsufficientStockError(
                            transaction.material_id,
                            transaction.warehouse_id,
                            requested=transaction.quantity,
                            available=available,
                        )

                if row is None:
                    stock = StockLevel(
                        id=_generate_id(),
                        material_id=transaction.material_id,
                        warehouse_id=transaction.warehouse_id,
                        unit_price=transaction.unit_price,
                        created_at=now,
                        last_updated=now,
                    )
                    await self._insert_stock_level(conn, stock)
                    created = True
                else:
                    stock = self._row_to_stock_level(row)

                transaction.stock_level_id = stock.id
                cursor = await conn.execute(
                    """
                    INSERT INTO material_transactions (
                        type, material_id, warehouse_id, stock_level_id,
                        quantity, unit_price, total_price, supplier_id,
                        project_id, user_id, notes, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction.type.value,
                        transaction.material_id,
                        transaction.warehouse_id,
                        transaction.stock_level_id,
                        transaction.quantity,
                        transaction.unit_price,
                        transaction.total_price,
                        transaction.supplier_id,
                        transaction.project_id,
                        transaction.user_id,
                        transaction.notes,
                        transaction.created_at.isoformat(),
                    ),
                )
                transaction.id = cursor.lastrowid

                await self._write_stock(
                    conn,
                    stock,
                    current_stock=stock.current_stock + transaction.signed_quantity,
                    safety_stock=stock.safety_stock,
                    unit_price=(
                        transaction.unit_price
                        if transaction.unit_price is not None
                        else stock.unit_price
                    ),
                    now=now,
                )
        except aiosqlite.Error as e:
            raise DatabaseError("apply_movement", str(e)) from e

        logger.info(
            "stock_movement_recorded",
            transaction_id=transaction.id,
            type=transaction.type.value,
            qty=transaction.quantity,
            stock_level_id=stock.id,
            current_stock=stock.current_stock,
            stock_created=created,
            user_id=transaction.user_id,
        )
        return MovementOutcome(transaction=transaction, stock_level=stock, created=created)

    async def adjust_stock_level(
        self,
        stock_level_id: str,
        changes: dict[str, Any],
        user_id: str,
        reason: str | None = None,
    ) -> tuple[StockLevel, StockAdjustment]:
        """Overwrite stock fields and append the audit entry atomically."""
        now = datetime.now(UTC)

        try:
            async with get_transaction(immediate=True) as conn:
                cursor = await conn.execute(
                    "SELECT * FROM stock_levels WHERE id = ?", (stock_level_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise StockLevelNotFoundError(stock_level_id)
                stock = self._row_to_stock_level(row)

                cursor = await conn.execute(
                    """
                    SELECT COALESCE(MAX(id), 0) FROM material_transactions
                    WHERE stock_level_id = ?
                    """,
                    (stock_level_id,),
                )
                last_tx_id = (await cursor.fetchone())[0]

                adjustment = StockAdjustment(
                    stock_level_id=stock_level_id,
                    user_id=user_id,
                    previous_current_stock=stock.current_stock,
                    new_current_stock=changes.get("current_stock", stock.current_stock),
                    previous_safety_stock=stock.safety_stock,
                    new_safety_stock=changes.get("safety_stock", stock.safety_stock),
                    previous_unit_price=stock.unit_price,
                    new_unit_price=changes.get("unit_price", stock.unit_price),
                    reason=reason,
                    after_transaction_id=last_tx_id,
                    created_at=now,
                )

                await self._write_stock(
                    conn,
                    stock,
                    current_stock=adjustment.new_current_stock,
                    safety_stock=adjustment.new_safety_stock,
                    unit_price=adjustment.new_unit_price,
                    now=now,
                )

                cursor = await conn.execute(
                    """
                    INSERT INTO stock_adjustments (
                        stock_level_id, user_id, previous_current_stock,
                        new_current_stock, previous_safety_stock, new_safety_stock,
                        previous_unit_price, new_unit_price, reason,
                        after_transaction_id, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        adjustment.stock_level_id,
                        adjustment.user_id,
                        adjustment.previous_current_stock,
                        adjustment.new_current_stock,
                        adjustment.previous_safety_stock,
                        adjustment.new_safety_stock,
                        adjustment.previous_unit_price,
                        adjustment.new_unit_price,
                        adjustment.reason,
                        adjustment.after_transaction_id,
                        adjustment.created_at.isoformat(),
                    ),
                )
                adjustment.id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise DatabaseError("adjust_stock_level", str(e)) from e

        logger.info(
            "stock_adjusted",
            audit="manual_adjustment",
            stock_level_id=stock_level_id,
            adjustment_id=adjustment.id,
            user_id=user_id,
            previous_current_stock=adjustment.previous_current_stock,
            new_current_stock=adjustment.new_current_stock,
            previous_safety_stock=adjustment.previous_safety_stock,
            new_safety_stock=adjustment.new_safety_stock,
            reason=reason,
        )
        return stock, adjustment

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_stock_levels(
        self, query: StockLevelQuery
    ) -> tuple[list[StockLevel], int]:
        """List stock levels with filters, search, sort and pagination."""
        clauses: list[str] = []
        params: list[Any] = []
        if query.material_id:
            clauses.append("s.material_id = ?")
            params.append(query.material_id)
        if query.warehouse_id:
            clauses.append("s.warehouse_id = ?")
            params.append(query.warehouse_id)
        if query.material_base_id:
            clauses.append("m.material_base_id = ?")
            params.append(query.material_base_id)
        if query.low_stock_only:
            clauses.append("s.current_stock <= s.safety_stock")
        if query.search and query.search.strip():
            clauses.append(
                "(m.code LIKE ? OR m.name LIKE ? OR w.code LIKE ? OR w.name LIKE ?)"
            )
            params.extend([_like(query.search)] * 4)

        base = f"""
            FROM stock_levels s
            JOIN materials m ON m.id = s.material_id
            JOIN warehouses w ON w.id = s.warehouse_id
            {_where(clauses)}
        """
        direction = "DESC" if query.descending else "ASC"
        order = f"{_STOCK_SORT_COLUMNS[query.sort]} {direction}, s.id {direction}"

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) {base}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT s.* {base} ORDER BY {order} LIMIT ? OFFSET ?",
                [*params, query.paging.limit, query.paging.offset],
            )
            rows = await cursor.fetchall()
            return [self._row_to_stock_level(row) for row in rows], total

    async def list_transactions(
        self, query: TransactionQuery
    ) -> tuple[list[MaterialTransaction], int]:
        """List transactions newest first with filters and pagination."""
        clauses, params = _transaction_filters(query)
        if query.search and query.search.strip():
            clauses.append(
                "(t.notes LIKE ? OR m.code LIKE ? OR m.name LIKE ?"
                " OR m.size LIKE ? OR m.finish_type LIKE ?)"
            )
            params.extend([_like(query.search)] * 5)

        base = f"""
            FROM material_transactions t
            JOIN materials m ON m.id = t.material_id
            {_where(clauses)}
        """

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) {base}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"""
                SELECT t.* {base}
                ORDER BY t.created_at DESC, t.id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, query.paging.limit, query.paging.offset],
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows], total

    async def list_transactions_for_report(
        self, filters: ReportFilters
    ) -> list[MaterialTransaction]:
        """All matching transactions, oldest first."""
        clauses, params = _transaction_filters(filters)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT t.* FROM material_transactions t
                {_where(clauses)}
                ORDER BY t.created_at ASC, t.id ASC
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def list_stock_transactions(
        self, stock_level_id: str, after_transaction_id: int = 0
    ) -> list[MaterialTransaction]:
        """Transactions of one stock level after a given id, in id order."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM material_transactions
                WHERE stock_level_id = ? AND id > ?
                ORDER BY id
                """,
                (stock_level_id, after_transaction_id),
            )
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def list_adjustments(self, stock_level_id: str) -> list[StockAdjustment]:
        """Manual adjustments, newest first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_adjustments
                WHERE stock_level_id = ?
                ORDER BY id DESC
                """,
                (stock_level_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_adjustment(row) for row in rows]

    async def stock_totals(self, warehouse_id: str | None = None) -> dict[str, float]:
        """Counts, units and value over stock levels."""
        where = "WHERE warehouse_id = ?" if warehouse_id else ""
        params = (warehouse_id,) if warehouse_id else ()
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT
                    COUNT(*) AS stock_levels,
                    COALESCE(SUM(CASE WHEN current_stock <= safety_stock THEN 1 ELSE 0 END), 0)
                        AS low_stock,
                    COALESCE(SUM(CASE WHEN current_stock = 0 THEN 1 ELSE 0 END), 0)
                        AS out_of_stock,
                    COALESCE(SUM(current_stock), 0) AS total_units,
                    COALESCE(SUM(current_stock * COALESCE(unit_price, 0)), 0) AS total_value
                FROM stock_levels
                {where}
                """,
                params,
            )
            row = await cursor.fetchone()
            return {
                "stock_levels": row["stock_levels"],
                "low_stock": row["low_stock"],
                "out_of_stock": row["out_of_stock"],
                "total_units": row["total_units"],
                "total_value": float(row["total_value"]),
            }

    async def movement_totals(
        self, since: datetime, warehouse_id: str | None = None
    ) -> dict[str, float]:
        """IN/OUT counts and values of transactions created since `since`."""
        clauses = ["created_at >= ?"]
        params: list[Any] = [since.isoformat()]
        if warehouse_id:
            clauses.append("warehouse_id = ?")
            params.append(warehouse_id)

        totals = {"in_count": 0, "out_count": 0, "in_value": 0.0, "out_value": 0.0}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT type, COUNT(*) AS n, COALESCE(SUM(total_price), 0) AS value
                FROM material_transactions
                {_where(clauses)}
                GROUP BY type
                """,
                params,
            )
            for row in await cursor.fetchall():
                prefix = "in" if row["type"] == TransactionType.IN.value else "out"
                totals[f"{prefix}_count"] = row["n"]
                totals[f"{prefix}_value"] = float(row["value"])
        return totals

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _fetch_pair(
        conn: aiosqlite.Connection, material_id: str, warehouse_id: str
    ) -> aiosqlite.Row | None:
        cursor = await conn.execute(
            "SELECT * FROM stock_levels WHERE material_id = ? AND warehouse_id = ?",
            (material_id, warehouse_id),
        )
        return await cursor.fetchone()

    @staticmethod
    async def _check_references(
        conn: aiosqlite.Connection, transaction: MaterialTransaction
    ) -> None:
        """Raise the matching NotFoundError for a missing referenced row."""
        references = (
            ("materials", transaction.material_id, MaterialNotFoundError),
            ("warehouses", transaction.warehouse_id, WarehouseNotFoundError),
            ("suppliers", transaction.supplier_id, SupplierNotFoundError),
            ("projects", transaction.project_id, ProjectNotFoundError),
        )
        for table, record_id, error in references:
            if record_id is None:
                continue
            cursor = await conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,))
            if await cursor.fetchone() is None:
                raise error(record_id)

    @staticmethod
    async def _insert_stock_level(conn: aiosqlite.Connection, stock: StockLevel) -> None:
        await conn.execute(
            """
            INSERT INTO stock_levels (
                id, material_id, warehouse_id, current_stock, safety_stock,
                unit_price, initial_stock, version, last_updated, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                stock.id,
                stock.material_id,
                stock.warehouse_id,
                stock.current_stock,
                stock.safety_stock,
                stock.unit_price,
                stock.initial_stock,
                stock.version,
                stock.last_updated.isoformat(),
                stock.created_at.isoformat(),
            ),
        )

    @staticmethod
    async def _write_stock(
        conn: aiosqlite.Connection,
        stock: StockLevel,
        current_stock: int,
        safety_stock: int,
        unit_price: float | None,
        now: datetime,
    ) -> None:
        """Versioned update; mutates `stock` to the written state."""
        cursor = await conn.execute(
            """
            UPDATE stock_levels SET
                current_stock = ?,
                safety_stock = ?,
                unit_price = ?,
                last_updated = ?,
                version = version + 1
            WHERE id = ? AND version = ?
            """,
            (
                current_stock,
                safety_stock,
                unit_price,
                now.isoformat(),
                stock.id,
                stock.version,
            ),
        )
        if cursor.rowcount == 0:
            raise ConcurrencyConflictError(stock.id or "", stock.version)

        stock.current_stock = current_stock
        stock.safety_stock = safety_stock
        stock.unit_price = unit_price
        stock.last_updated = now
        stock.version += 1

    @staticmethod
    def _row_to_stock_level(row: aiosqlite.Row) -> StockLevel:
        """Convert a database row to a StockLevel entity."""
        return StockLevel(
            id=row["id"],
            material_id=row["material_id"],
            warehouse_id=row["warehouse_id"],
            current_stock=row["current_stock"],
            safety_stock=row["safety_stock"],
            unit_price=row["unit_price"],
            initial_stock=row["initial_stock"],
            version=row["version"],
            last_updated=datetime.fromisoformat(row["last_updated"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> MaterialTransaction:
        """Convert a database row to a MaterialTransaction entity."""
        return MaterialTransaction(
            id=row["id"],
            type=TransactionType(row["type"]),
            material_id=row["material_id"],
            warehouse_id=row["warehouse_id"],
            stock_level_id=row["stock_level_id"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            total_price=row["total_price"],
            supplier_id=row["supplier_id"],
            project_id=row["project_id"],
            user_id=row["user_id"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_adjustment(row: aiosqlite.Row) -> StockAdjustment:
        """Convert a database row to a StockAdjustment entity."""
        return StockAdjustment(
            id=row["id"],
            stock_level_id=row["stock_level_id"],
            user_id=row["user_id"],
            previous_current_stock=row["previous_current_stock"],
            new_current_stock=row["new_current_stock"],
            previous_safety_stock=row["previous_safety_stock"],
            new_safety_stock=row["new_safety_stock"],
            previous_unit_price=row["previous_unit_price"],
            new_unit_price=row["new_unit_price"],
            reason=row["reason"],
            after_transaction_id=row["after_transaction_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
