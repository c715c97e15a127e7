"""API tests for warehouses, materials, suppliers and projects."""

import pytest
from httpx import AsyncClient


class TestWarehouses:
    """Warehouse endpoints."""

    async def test_create_list_get(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.post(
            "/api/warehouses",
            json={"code": "WH-01", "name": "Main yard", "purpose": "STORAGE"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        warehouse = response.json()
        assert warehouse["is_active"] is True

        response = await async_client.get("/api/warehouses", headers=auth_headers)
        assert response.json()["pagination"]["total"] == 1

        response = await async_client.get(
            f"/api/warehouses/{warehouse['id']}", headers=auth_headers
        )
        assert response.json()["code"] == "WH-01"

    async def test_duplicate_code(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.post(
            "/api/warehouses",
            json={"code": "WH-MAIN", "name": "Again"},
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_CODE"

    async def test_update(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.put(
            f"/api/warehouses/{seeded['site']}",
            json={"is_active": False},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        response = await async_client.get(
            "/api/warehouses", params={"is_active": "true"}, headers=auth_headers
        )
        assert [w["code"] for w in response.json()["items"]] == ["WH-MAIN"]

    async def test_update_empty_body(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.put(
            f"/api/warehouses/{seeded['site']}", json={}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_delete_blocked_by_stock(self, async_client: AsyncClient, auth_headers, seeded):
        await async_client.post(
            "/api/ledger/movements",
            json={
                "type": "IN",
                "material_id": seeded["tile"],
                "warehouse_id": seeded["main"],
                "quantity": 1,
            },
            headers=auth_headers,
        )
        response = await async_client.delete(
            f"/api/warehouses/{seeded['main']}", headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DEPENDENT_RECORDS_EXIST"

        response = await async_client.delete(
            f"/api/warehouses/{seeded['site']}", headers=auth_headers
        )
        assert response.status_code == 204

    async def test_missing(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.get("/api/warehouses/nope", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error_code"] == "WAREHOUSE_NOT_FOUND"


class TestMaterials:
    """Material endpoints."""

    async def test_create_and_search(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.post(
            "/api/materials",
            json={
                "material_base_id": "BASE-1",
                "code": "TILE-30-BLK",
                "name": "Tile 30x30 black",
                "size": "30x30",
                "unit_price": 3.2,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201

        response = await async_client.get(
            "/api/materials", params={"search": "black"}, headers=auth_headers
        )
        assert [m["code"] for m in response.json()["items"]] == ["TILE-30-BLK"]

    async def test_delete(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.delete(
            f"/api/materials/{seeded['cement']}", headers=auth_headers
        )
        assert response.status_code == 204

        response = await async_client.get(
            f"/api/materials/{seeded['cement']}", headers=auth_headers
        )
        assert response.status_code == 404


    async def test_update(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.put(
            f"/api/materials/{seeded['tile']}",
            json={"unit_price": 6.0, "finish_type": "polished"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        material = response.json()
        assert material["unit_price"] == 6.0
        assert material["finish_type"] == "polished"
        assert material["code"] == "TILE-60-WHT"

    @pytest.mark.parametrize(
        "body",
        [
            {"material_base_id": "BASE-X"},
            {"color_id": "RED"},
            {"name": None},
        ],
    )
    async def test_update_rejected(
        self, async_client: AsyncClient, auth_headers, seeded, body
    ):
        response = await async_client.put(
            f"/api/materials/{seeded['tile']}", json=body, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_update_missing(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.put(
            "/api/materials/nope", json={"name": "x"}, headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "MATERIAL_NOT_FOUND"


class TestSuppliersAndProjects:
    async def test_supplier(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.post(
            "/api/suppliers",
            json={"code": "SUP-9", "name": "Tile House", "email": "sales@example.com"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        supplier_id = response.json()["id"]

        response = await async_client.get(f"/api/suppliers/{supplier_id}", headers=auth_headers)
        assert response.json()["supplier_type"] == "GENERAL"

    async def test_supplier_update(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.put(
            f"/api/suppliers/{seeded['supplier']}",
            json={"contact_person": "R. Haddad", "email": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["contact_person"] == "R. Haddad"

        response = await async_client.put(
            f"/api/suppliers/{seeded['supplier']}", json={"code": None}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_supplier_delete_blocked_by_delivery(
        self, async_client: AsyncClient, auth_headers, seeded
    ):
        await async_client.post(
            "/api/ledger/movements",
            json={
                "type": "IN",
                "material_id": seeded["tile"],
                "warehouse_id": seeded["main"],
                "quantity": 2,
                "supplier_id": seeded["supplier"],
            },
            headers=auth_headers,
        )
        response = await async_client.delete(
            f"/api/suppliers/{seeded['supplier']}", headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "DEPENDENT_RECORDS_EXIST"

    async def test_supplier_delete(self, async_client: AsyncClient, auth_headers, seeded):
        response = await async_client.delete(
            f"/api/suppliers/{seeded['supplier']}", headers=auth_headers
        )
        assert response.status_code == 204

        response = await async_client.delete(
            f"/api/suppliers/{seeded['supplier']}", headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "SUPPLIER_NOT_FOUND"

    async def test_project(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.post(
            "/api/projects",
            json={"code": "PRJ-9", "name": "School", "status": "IN_PROGRESS"},
            headers=auth_headers,
        )
        assert response.status_code == 201

        response = await async_client.get("/api/projects", headers=auth_headers)
        assert response.json()["items"][0]["status"] == "IN_PROGRESS"

    async def test_invalid_status(self, async_client: AsyncClient, auth_headers, ledger_db):
        response = await async_client.post(
            "/api/projects",
            json={"code": "PRJ-X", "name": "X", "status": "DONE"},
            headers=auth_headers,
        )
        assert response.status_code == 422
