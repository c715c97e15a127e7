"""Abstract interface for reference data storage."""

from abc import ABC, abstractmethod
from typing import Any

from buildstock.core.entities.reference import Material, Project, Supplier, Warehouse


class IReferenceStore(ABC):
    """Interface for materials, warehouses, suppliers and projects."""

    # Materials
    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Create a material. Raises DuplicateCodeError on a taken code."""
        pass

    @abstractmethod
    async def get_material(self, material_id: str) -> Material | None:
        pass

    @abstractmethod
    async def list_materials(
        self,
        search: str | None = None,
        material_base_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Material], int]:
        pass

    @abstractmethod
    async def update_material(
        self, material_id: str, changes: dict[str, Any]
    ) -> Material:
        """Update mutable material fields. Raises MaterialNotFoundError."""
        pass

    @abstractmethod
    async def delete_material(self, material_id: str) -> None:
        """Delete a material. Raises DependentRecordsExistError when referenced."""
        pass

    # Warehouses
    @abstractmethod
    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        """Create a warehouse. Raises DuplicateCodeError on a taken code."""
        pass

    @abstractmethod
    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        pass

    @abstractmethod
    async def list_warehouses(
        self,
        search: str | None = None,
        purpose: str | None = None,
        is_active: bool | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Warehouse], int]:
        pass

    @abstractmethod
    async def update_warehouse(
        self, warehouse_id: str, changes: dict[str, Any]
    ) -> Warehouse:
        """Update mutable warehouse fields. Raises WarehouseNotFoundError."""
        pass

    @abstractmethod
    async def delete_warehouse(self, warehouse_id: str) -> None:
        """Delete a warehouse. Raises DependentRecordsExistError when referenced."""
        pass

    # Suppliers
    @abstractmethod
    async def create_supplier(self, supplier: Supplier) -> Supplier:
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        pass

    @abstractmethod
    async def list_suppliers(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> tuple[list[Supplier], int]:
        pass

    @abstractmethod
    async def update_supplier(
        self, supplier_id: str, changes: dict[str, Any]
    ) -> Supplier:
        """Update mutable supplier fields. Raises SupplierNotFoundError."""
        pass

    @abstractmethod
    async def delete_supplier(self, supplier_id: str) -> None:
        """Delete a supplier. Raises DependentRecordsExistError when transactions cite it."""
        pass

    # Projects
    @abstractmethod
    async def create_project(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def get_project(self, project_id: str) -> Project | None:
        pass

    @abstractmethod
    async def list_projects(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> tuple[list[Project], int]:
        pass
