"""SQLite implementation of reference data storage."""

import uuid
from datetime import UTC, datetime
from typing import Any

import aiosqlite

from buildstock.config import get_logger
from buildstock.core.entities.reference import (
    Material,
    Project,
    ProjectStatus,
    Supplier,
    Warehouse,
)
from buildstock.core.exceptions import (
    DatabaseError,
    DependentRecordsExistError,
    DuplicateCodeError,
    MaterialNotFoundError,
    NotFoundError,
    SupplierNotFoundError,
    WarehouseNotFoundError,
)
from buildstock.core.interfaces.reference_store import IReferenceStore
from buildstock.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_WAREHOUSE_UPDATABLE = ("code", "name", "location", "purpose", "is_active")
# material_base_id, color_id and code identify the variant and stay fixed
_MATERIAL_UPDATABLE = (
    "name",
    "category",
    "unit",
    "size",
    "finish_type",
    "unit_price",
    "description",
    "is_active",
)
_SUPPLIER_UPDATABLE = (
    "code",
    "name",
    "supplier_type",
    "contact_person",
    "phone",
    "email",
    "is_active",
)

_LEDGER_TABLES = ("stock_levels", "material_transactions")


def _generate_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


def _integrity_error(
    operation: str, entity: str, code: str, error: aiosqlite.IntegrityError
) -> Exception:
    if "UNIQUE" in str(error):
        return DuplicateCodeError(entity, code)
    return DatabaseError(operation, str(error))


class SQLiteReferenceStore(IReferenceStore):
    """SQLite implementation of materials, warehouses, suppliers and projects."""

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    async def create_material(self, material: Material) -> Material:
        """Create a new material record."""
        if not material.id:
            material.id = _generate_id()
        material.created_at = material.updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO materials (
                        id, material_base_id, code, name, category, unit,
                        color_id, size, finish_type, unit_price, description,
                        is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        material.id,
                        material.material_base_id,
                        material.code,
                        material.name,
                        material.category,
                        material.unit,
                        material.color_id,
                        material.size,
                        material.finish_type,
                        material.unit_price,
                        material.description,
                        int(material.is_active),
                        material.created_at.isoformat(),
                        material.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise _integrity_error("create_material", "material", material.code, e) from e

        logger.info("material_created", material_id=material.id, code=material.code)
        return material

    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_material(row) if row else None

    async def list_materials(
        self,
        search: str | None = None,
        material_base_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Material], int]:
        """List materials by code with optional search."""
        clauses: list[str] = []
        params: list[Any] = []
        if search and search.strip():
            clauses.append("(code LIKE ? OR name LIKE ?)")
            params.extend([f"%{search.strip()}%"] * 2)
        if material_base_id:
            clauses.append("material_base_id = ?")
            params.append(material_base_id)
        rows, total = await self._page("materials", clauses, params, "code", limit, offset)
        return [self._row_to_material(row) for row in rows], total

    async def update_material(
        self, material_id: str, changes: dict[str, Any]
    ) -> Material:
        """Update mutable material fields."""
        row = await self._update(
            "materials", "material", material_id, changes,
            _MATERIAL_UPDATABLE, MaterialNotFoundError,
        )
        return self._row_to_material(row)

    async def delete_material(self, material_id: str) -> None:
        """Delete a material that nothing references."""
        await self._delete(
            "materials", "material", material_id, "material_id",
            _LEDGER_TABLES, MaterialNotFoundError,
        )

    # ------------------------------------------------------------------
    # Warehouses
    # ------------------------------------------------------------------

    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        """Create a new warehouse record."""
        if not warehouse.id:
            warehouse.id = _generate_id()
        warehouse.created_at = warehouse.updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO warehouses (
                        id, code, name, location, purpose, is_active,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        warehouse.id,
                        warehouse.code,
                        warehouse.name,
                        warehouse.location,
                        warehouse.purpose,
                        int(warehouse.is_active),
                        warehouse.created_at.isoformat(),
                        warehouse.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise _integrity_error("create_warehouse", "warehouse", warehouse.code, e) from e

        logger.info("warehouse_created", warehouse_id=warehouse.id, code=warehouse.code)
        return warehouse

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        """Get warehouse by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_warehouse(row) if row else None

    async def list_warehouses(
        self,
        search: str | None = None,
        purpose: str | None = None,
        is_active: bool | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Warehouse], int]:
        """List warehouses by code with optional filters."""
        clauses: list[str] = []
        params: list[Any] = []
        if search and search.strip():
            clauses.append("(code LIKE ? OR name LIKE ? OR location LIKE ?)")
            params.extend([f"%{search.strip()}%"] * 3)
        if purpose:
            clauses.append("purpose = ?")
            params.append(purpose)
        if is_active is not None:
            clauses.append("is_active = ?")
            params.append(int(is_active))
        rows, total = await self._page("warehouses", clauses, params, "code", limit, offset)
        return [self._row_to_warehouse(row) for row in rows], total

    async def update_warehouse(
        self, warehouse_id: str, changes: dict[str, Any]
    ) -> Warehouse:
        """Update mutable warehouse fields."""
        row = await self._update(
            "warehouses", "warehouse", warehouse_id, changes,
            _WAREHOUSE_UPDATABLE, WarehouseNotFoundError,
        )
        return self._row_to_warehouse(row)

    async def delete_warehouse(self, warehouse_id: str) -> None:
        """Delete a warehouse that nothing references."""
        await self._delete(
            "warehouses", "warehouse", warehouse_id, "warehouse_id",
            _LEDGER_TABLES, WarehouseNotFoundError,
        )

    # ------------------------------------------------------------------
    # Suppliers
    # ------------------------------------------------------------------

    async def create_supplier(self, supplier: Supplier) -> Supplier:
        """Create a new supplier record."""
        if not supplier.id:
            supplier.id = _generate_id()
        supplier.created_at = supplier.updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO suppliers (
                        id, code, name, supplier_type, contact_person, phone,
                        email, is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        supplier.id,
                        supplier.code,
                        supplier.name,
                        supplier.supplier_type,
                        supplier.contact_person,
                        supplier.phone,
                        supplier.email,
                        int(supplier.is_active),
                        supplier.created_at.isoformat(),
                        supplier.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise _integrity_error("create_supplier", "supplier", supplier.code, e) from e

        logger.info("supplier_created", supplier_id=supplier.id, code=supplier.code)
        return supplier

    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        """Get supplier by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE id = ?", (supplier_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_supplier(row) if row else None

    async def list_suppliers(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> tuple[list[Supplier], int]:
        clauses: list[str] = []
        params: list[Any] = []
        if search and search.strip():
            clauses.append("(code LIKE ? OR name LIKE ?)")
            params.extend([f"%{search.strip()}%"] * 2)
        rows, total = await self._page("suppliers", clauses, params, "code", limit, offset)
        return [self._row_to_supplier(row) for row in rows], total

    async def update_supplier(
        self, supplier_id: str, changes: dict[str, Any]
    ) -> Supplier:
        """Update mutable supplier fields."""
        row = await self._update(
            "suppliers", "supplier", supplier_id, changes,
            _SUPPLIER_UPDATABLE, SupplierNotFoundError,
        )
        return self._row_to_supplier(row)

    async def delete_supplier(self, supplier_id: str) -> None:
        """Delete a supplier no transaction was received from."""
        await self._delete(
            "suppliers", "supplier", supplier_id, "supplier_id",
            ("material_transactions",), SupplierNotFoundError,
        )

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project(self, project: Project) -> Project:
        """Create a new project record."""
        if not project.id:
            project.id = _generate_id()
        project.created_at = project.updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO projects (id, code, name, status, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        project.id,
                        project.code,
                        project.name,
                        project.status.value,
                        project.created_at.isoformat(),
                        project.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise _integrity_error("create_project", "project", project.code, e) from e

        logger.info("project_created", project_id=project.id, code=project.code)
        return project

    async def get_project(self, project_id: str) -> Project | None:
        """Get project by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM projects WHERE id = ?", (project_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_project(row) if row else None

    async def list_projects(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> tuple[list[Project], int]:
        clauses: list[str] = []
        params: list[Any] = []
        if search and search.strip():
            clauses.append("(code LIKE ? OR name LIKE ?)")
            params.extend([f"%{search.strip()}%"] * 2)
        rows, total = await self._page("projects", clauses, params, "code", limit, offset)
        return [self._row_to_project(row) for row in rows], total

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _page(
        table: str,
        clauses: list[str],
        params: list[Any],
        order_by: str,
        limit: int,
        offset: int,
    ) -> tuple[list[aiosqlite.Row], int]:
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM {table} {where}", params)
            total = (await cursor.fetchone())[0]
            cursor = await conn.execute(
                f"SELECT * FROM {table} {where} ORDER BY {order_by} LIMIT ? OFFSET ?",
                [*params, limit, offset],
            )
            return list(await cursor.fetchall()), total

    @staticmethod
    async def _update(
        table: str,
        entity: str,
        record_id: str,
        changes: dict[str, Any],
        updatable: tuple[str, ...],
        not_found: type[NotFoundError],
    ) -> aiosqlite.Row:
        """Write the updatable subset of `changes` and return the fresh row."""
        fields = {k: v for k, v in changes.items() if k in updatable}
        if "is_active" in fields:
            fields["is_active"] = int(fields["is_active"])
        fields["updated_at"] = datetime.now(UTC).isoformat()

        assignments = ", ".join(f"{name} = ?" for name in fields)
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"UPDATE {table} SET {assignments} WHERE id = ?",
                    [*fields.values(), record_id],
                )
                if cursor.rowcount == 0:
                    raise not_found(record_id)
                cursor = await conn.execute(
                    f"SELECT * FROM {table} WHERE id = ?", (record_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.IntegrityError as e:
            raise _integrity_error(
                f"update_{entity}", entity, str(changes.get("code")), e
            ) from e

        logger.info(f"{entity}_updated", record_id=record_id, fields=sorted(fields))
        return row

    @staticmethod
    async def _delete(
        table: str,
        entity: str,
        record_id: str,
        column: str,
        dependent_tables: tuple[str, ...],
        not_found: type[NotFoundError],
    ) -> None:
        """Delete a row unless ledger rows still reference it."""
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,))
            if await cursor.fetchone() is None:
                raise not_found(record_id)

            dependents = {}
            for dependent in dependent_tables:
                cursor = await conn.execute(
                    f"SELECT COUNT(*) FROM {dependent} WHERE {column} = ?", (record_id,)
                )
                count = (await cursor.fetchone())[0]
                if count:
                    dependents[dependent] = count
            if dependents:
                raise DependentRecordsExistError(entity, record_id, dependents)

            await conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        logger.info(f"{entity}_deleted", record_id=record_id)

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        """Convert a database row to a Material entity."""
        return Material(
            id=row["id"],
            material_base_id=row["material_base_id"],
            code=row["code"],
            name=row["name"],
            category=row["category"],
            unit=row["unit"],
            color_id=row["color_id"],
            size=row["size"],
            finish_type=row["finish_type"],
            unit_price=row["unit_price"],
            description=row["description"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_warehouse(row: aiosqlite.Row) -> Warehouse:
        """Convert a database row to a Warehouse entity."""
        return Warehouse(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            location=row["location"],
            purpose=row["purpose"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        """Convert a database row to a Supplier entity."""
        return Supplier(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            supplier_type=row["supplier_type"],
            contact_person=row["contact_person"],
            phone=row["phone"],
            email=row["email"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_project(row: aiosqlite.Row) -> Project:
        """Convert a database row to a Project entity."""
        return Project(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            status=ProjectStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
