"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from buildstock.core.entities.identity import Caller, UserRole
from buildstock.core.entities.reference import Material, Project, Supplier, Warehouse
from buildstock.infrastructure.storage.sqlite import (
    SQLiteLedgerStore,
    SQLiteReferenceStore,
    close_pool,
)
from buildstock.infrastructure.storage.sqlite import connection as conn_module
from buildstock.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path) -> MagicMock:
    """Storage settings pointing at the temporary database."""
    settings = MagicMock()
    settings.storage.db_path = temp_db_path
    settings.storage.pool_size = 3
    settings.storage.busy_timeout = 5000
    return settings


@pytest.fixture
async def ledger_db(
    temp_db_path: Path, mock_settings: MagicMock
) -> AsyncGenerator[Path, None]:
    """Migrated temporary database served by the global connection pool."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert results and all(r.success for r in results)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await close_pool()


@pytest.fixture
def ledger_store(ledger_db: Path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
def reference_store(ledger_db: Path) -> SQLiteReferenceStore:
    return SQLiteReferenceStore()


@pytest.fixture
async def seeded(reference_store: SQLiteReferenceStore) -> dict[str, str]:
    """Two materials, two warehouses, a supplier and a project."""
    tile = await reference_store.create_material(
        Material(
            material_base_id="BASE-TILE",
            code="TILE-60-WHT",
            name="Porcelain tile 60x60 white",
            unit="pcs",
            size="60x60",
            finish_type="matte",
            unit_price=5.0,
        )
    )
    cement = await reference_store.create_material(
        Material(
            material_base_id="BASE-CEM",
            code="CEM-50",
            name="Portland cement 50kg",
            unit="bag",
        )
    )
    main = await reference_store.create_warehouse(
        Warehouse(code="WH-MAIN", name="Main yard", location="Dubai", purpose="STORAGE")
    )
    site = await reference_store.create_warehouse(
        Warehouse(code="WH-SITE", name="Tower site", purpose="SITE")
    )
    supplier = await reference_store.create_supplier(
        Supplier(code="SUP-01", name="Gulf Ceramics")
    )
    project = await reference_store.create_project(
        Project(code="PRJ-01", name="Marina tower")
    )
    return {
        "tile": tile.id,
        "cement": cement.id,
        "main": main.id,
        "site": site.id,
        "supplier": supplier.id,
        "project": project.id,
    }


@pytest.fixture
def caller() -> Caller:
    return Caller(user_id="user-1", role=UserRole.USER)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Identity headers as forwarded by the auth gateway."""
    return {"X-User-Id": "user-1", "X-User-Role": "USER"}


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    from buildstock.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
