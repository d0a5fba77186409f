"""API tests for catalog endpoints."""

import pytest

from src.core.entities import Equipment, Material
from src.core.exceptions import MaterialNotFoundError


@pytest.fixture
def catalog_writes(mock_catalog_store):
    """Store writes echo the entity with an id assigned."""
    mock_catalog_store.create_equipment.side_effect = lambda e: e.model_copy(
        update={"id": e.id or "eq-new"}
    )
    mock_catalog_store.update_equipment.side_effect = lambda e: e
    mock_catalog_store.create_material.side_effect = lambda m: m.model_copy(
        update={"id": m.id or "mat-new"}
    )
    mock_catalog_store.update_material.side_effect = lambda m: m
    return mock_catalog_store


class TestEquipmentEndpoints:
    async def test_create(self, client, api_headers, catalog_writes, tenant_id):
        response = await client.post(
            "/api/catalog/equipment",
            json={
                "name": "Roland VersaUV",
                "type": "UV Printer",
                "ink_rates": {"c": 0.5, "white": "0.3"},
            },
            headers=api_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "eq-new"
        assert data["uses_ink"] is True
        assert data["ink_rates"]["white"] == 0.3
        created: Equipment = catalog_writes.create_equipment.call_args.args[0]
        assert created.tenant_id == tenant_id

    async def test_create_requires_name(self, client, api_headers, catalog_writes):
        response = await client.post(
            "/api/catalog/equipment", json={"type": "Laser"}, headers=api_headers
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_list(self, client, api_headers, mock_catalog_store, uv_printer, laser_cutter):
        mock_catalog_store.list_equipment.return_value = [laser_cutter, uv_printer]

        response = await client.get("/api/catalog/equipment", headers=api_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [e["uses_ink"] for e in data["items"]] == [False, True]

    async def test_get_missing(self, client, api_headers, mock_catalog_store):
        mock_catalog_store.get_equipment.return_value = None

        response = await client.get("/api/catalog/equipment/nope", headers=api_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "EQUIPMENT_NOT_FOUND"

    async def test_update(self, client, api_headers, catalog_writes, laser_cutter):
        catalog_writes.get_equipment.return_value = laser_cutter

        response = await client.put(
            "/api/catalog/equipment/eq-laser",
            json={"name": "Laser Cutter", "type": "Laser Cutter", "hourly_rate": 55},
            headers=api_headers,
        )

        assert response.status_code == 200
        assert response.json()["hourly_rate"] == 55
        assert response.json()["id"] == "eq-laser"

    async def test_delete(self, client, api_headers, mock_catalog_store):
        mock_catalog_store.delete_equipment.return_value = True

        response = await client.delete("/api/catalog/equipment/eq-uv", headers=api_headers)

        assert response.status_code == 204

    async def test_delete_missing(self, client, api_headers, mock_catalog_store):
        mock_catalog_store.delete_equipment.return_value = False

        response = await client.delete("/api/catalog/equipment/eq-uv", headers=api_headers)

        assert response.status_code == 404


class TestMaterialEndpoints:
    async def test_create(self, client, api_headers, catalog_writes):
        response = await client.post(
            "/api/catalog/materials",
            json={"name": "Vinyl roll", "unit": "m", "purchase_price": 2, "selling_price": 5},
            headers=api_headers,
        )

        assert response.status_code == 201
        assert response.json()["selling_price"] == 5

    async def test_negative_price_rejected(self, client, api_headers, catalog_writes):
        response = await client.post(
            "/api/catalog/materials",
            json={"name": "Vinyl roll", "purchase_price": -1},
            headers=api_headers,
        )

        assert response.status_code == 422

    async def test_get(self, client, api_headers, mock_catalog_store, acrylic):
        mock_catalog_store.get_material.return_value = acrylic

        response = await client.get("/api/catalog/materials/mat-acrylic", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["on_hand"] == 50

    async def test_update_keeps_id(self, client, api_headers, catalog_writes, acrylic):
        catalog_writes.get_material.return_value = acrylic

        response = await client.put(
            "/api/catalog/materials/mat-acrylic",
            json={"name": "Acrylic sheet 3mm", "purchase_price": 13, "selling_price": 21},
            headers=api_headers,
        )

        assert response.status_code == 200
        updated: Material = catalog_writes.update_material.call_args.args[0]
        assert updated.id == "mat-acrylic"
        assert updated.selling_price == 21

    async def test_list(self, client, api_headers, mock_catalog_store, acrylic):
        mock_catalog_store.list_materials.return_value = [acrylic]

        response = await client.get("/api/catalog/materials?limit=10", headers=api_headers)

        assert response.status_code == 200
        assert response.json()["items"][0]["name"] == "Acrylic sheet 3mm"
        mock_catalog_store.list_materials.assert_awaited_once_with(
            "tenant-a", limit=10, offset=0
        )

    async def test_adjust_stock(self, client, api_headers, mock_catalog_store, tenant_id):
        response = await client.post(
            "/api/catalog/materials/mat-acrylic/stock",
            json={"delta": 12, "reason": "delivery"},
            headers=api_headers,
        )

        assert response.status_code == 200
        assert response.json()["on_hand"] == 62
        mock_catalog_store.adjust_stock.assert_awaited_once_with(tenant_id, "mat-acrylic", 12.0)

    async def test_adjust_stock_missing_material(self, client, api_headers, mock_catalog_store):
        mock_catalog_store.adjust_stock.side_effect = MaterialNotFoundError("mat-gone")

        response = await client.post(
            "/api/catalog/materials/mat-gone/stock", json={"delta": -1}, headers=api_headers
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "MATERIAL_NOT_FOUND"

    async def test_adjust_stock_requires_delta(self, client, api_headers):
        response = await client.post(
            "/api/catalog/materials/mat-acrylic/stock", json={}, headers=api_headers
        )

        assert response.status_code == 422


class TestTenantHeader:
    async def test_missing_header(self, client):
        response = await client.get("/api/catalog/equipment")

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "TENANT_REQUIRED"
        assert data["path"] == "/api/catalog/equipment"
        assert data["hint"]

    async def test_blank_header(self, client):
        response = await client.get("/api/catalog/materials", headers={"X-Tenant-ID": "  "})

        assert response.status_code == 400
