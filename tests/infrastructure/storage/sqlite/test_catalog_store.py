"""Tests for SQLiteCatalogStore."""

import pytest

from src.core.entities import BillingMode, Equipment, InkRates, Material
from src.core.exceptions import MaterialNotFoundError

TENANT = "tenant-a"
OTHER = "tenant-b"


def _printer(**overrides) -> Equipment:
    values = {
        "tenant_id": TENANT,
        "name": "UV Flatbed",
        "type": "UV Printer",
        "ink_rates": InkRates(c=0.5, white=0.3, soft_white=0.6),
        "use_soft_white": True,
    }
    values.update(overrides)
    return Equipment(**values)


def _material(**overrides) -> Material:
    values = {
        "tenant_id": TENANT,
        "name": "Acrylic 3mm",
        "unit": "sheet",
        "purchase_price": 12,
        "selling_price": 20,
        "on_hand": 10,
    }
    values.update(overrides)
    return Material(**values)


class TestEquipment:
    async def test_create_and_get(self, catalog_store):
        created = await catalog_store.create_equipment(_printer())

        assert created.id
        fetched = await catalog_store.get_equipment(TENANT, created.id)
        assert fetched.name == "UV Flatbed"
        assert fetched.ink_rates.c == 0.5
        assert fetched.ink_rates.soft_white == 0.6
        assert fetched.use_soft_white is True
        assert fetched.mode == BillingMode.HOURLY

    async def test_explicit_id_kept(self, catalog_store):
        created = await catalog_store.create_equipment(_printer(id="eq-1"))

        assert created.id == "eq-1"

    async def test_tenant_isolation(self, catalog_store):
        created = await catalog_store.create_equipment(_printer())

        assert await catalog_store.get_equipment(OTHER, created.id) is None
        assert await catalog_store.list_equipment(OTHER) == []
        assert await catalog_store.get_equipment_by_ids(OTHER, [created.id]) == {}

    async def test_list_sorted_by_name(self, catalog_store):
        await catalog_store.create_equipment(_printer(name="Zund cutter", type="Cutter"))
        await catalog_store.create_equipment(_printer(name="Epson sublimation"))

        names = [e.name for e in await catalog_store.list_equipment(TENANT)]

        assert names == ["Epson sublimation", "Zund cutter"]

    async def test_get_by_ids_skips_unknown(self, catalog_store):
        created = await catalog_store.create_equipment(_printer())

        found = await catalog_store.get_equipment_by_ids(TENANT, [created.id, "gone", ""])

        assert list(found) == [created.id]

    async def test_get_by_ids_empty(self, catalog_store):
        assert await catalog_store.get_equipment_by_ids(TENANT, []) == {}

    async def test_update(self, catalog_store):
        created = await catalog_store.create_equipment(_printer())

        updated = await catalog_store.update_equipment(
            created.model_copy(update={"mode": BillingMode.FLAT, "flat_fee": 35.0})
        )

        assert updated.mode == BillingMode.FLAT
        assert updated.flat_fee == 35.0

    async def test_delete(self, catalog_store):
        created = await catalog_store.create_equipment(_printer())

        assert await catalog_store.delete_equipment(TENANT, created.id) is True
        assert await catalog_store.delete_equipment(TENANT, created.id) is False
        assert await catalog_store.get_equipment(TENANT, created.id) is None


class TestMaterials:
    async def test_create_and_get(self, catalog_store):
        created = await catalog_store.create_material(_material())

        fetched = await catalog_store.get_material(TENANT, created.id)

        assert fetched.unit == "sheet"
        assert fetched.price.purchase_price == 12
        assert fetched.price.selling_price == 20

    async def test_update_and_list(self, catalog_store):
        created = await catalog_store.create_material(_material())
        await catalog_store.update_material(created.model_copy(update={"selling_price": 22.5}))

        materials = await catalog_store.list_materials(TENANT)

        assert [m.selling_price for m in materials] == [22.5]

    async def test_adjust_stock(self, catalog_store):
        created = await catalog_store.create_material(_material(on_hand=10))

        after = await catalog_store.adjust_stock(TENANT, created.id, -3.5)

        assert after.on_hand == 6.5

    async def test_stock_may_go_negative(self, catalog_store):
        created = await catalog_store.create_material(_material(on_hand=1))

        after = await catalog_store.adjust_stock(TENANT, created.id, -4)

        assert after.on_hand == -3

    async def test_adjust_unknown_material(self, catalog_store):
        with pytest.raises(MaterialNotFoundError):
            await catalog_store.adjust_stock(TENANT, "missing", 1)

    async def test_adjust_other_tenant(self, catalog_store):
        created = await catalog_store.create_material(_material())

        with pytest.raises(MaterialNotFoundError):
            await catalog_store.adjust_stock(OTHER, created.id, -1)

    async def test_delete(self, catalog_store):
        created = await catalog_store.create_material(_material())

        assert await catalog_store.delete_material(TENANT, created.id) is True
        assert await catalog_store.get_materials_by_ids(TENANT, [created.id]) == {}
