"""Tests for SQLiteTenantSettingsStore."""

import asyncio

from src.core.services.numbering import CodeKind


class TestTenantSettings:
    async def test_row_created_with_defaults(self, tenant_store):
        settings = await tenant_store.get_settings("shop-1")

        assert settings.tenant_id == "shop-1"
        assert settings.tax_rate == 0.0
        assert settings.default_margin_pct == 100.0
        assert settings.currency == "USD"
        assert settings.quote_prefix == "Q-"
        assert settings.counter_for(CodeKind.INVOICE) == 1

    async def test_defaults_follow_configuration(self, tenant_store, monkeypatch):
        from src.config import get_settings

        monkeypatch.setattr(get_settings().pricing, "default_tax_rate", 7.5)

        settings = await tenant_store.get_settings("shop-2")

        assert settings.tax_rate == 7.5

    async def test_update(self, tenant_store):
        settings = await tenant_store.get_settings("shop-1")

        updated = await tenant_store.update_settings(
            settings.model_copy(update={"tax_rate": 8.25, "quote_prefix": "EST-"})
        )

        assert updated.tax_rate == 8.25
        assert updated.quote_prefix == "EST-"
        assert (await tenant_store.get_settings("shop-1")).tax_rate == 8.25


class TestAllocateCode:
    async def test_sequential_per_kind(self, tenant_store):
        codes = [await tenant_store.allocate_code("shop-1", CodeKind.QUOTE) for _ in range(3)]
        job = await tenant_store.allocate_code("shop-1", CodeKind.JOB)

        assert codes == ["Q-00001", "Q-00002", "Q-00003"]
        assert job == "J-00001"

    async def test_counter_advances(self, tenant_store):
        await tenant_store.allocate_code("shop-1", CodeKind.INVOICE)

        settings = await tenant_store.get_settings("shop-1")

        assert settings.counter_for(CodeKind.INVOICE) == 2

    async def test_tenants_numbered_independently(self, tenant_store):
        first = await tenant_store.allocate_code("shop-1", CodeKind.QUOTE)
        second = await tenant_store.allocate_code("shop-2", CodeKind.QUOTE)

        assert first == second == "Q-00001"

    async def test_custom_prefix(self, tenant_store):
        settings = await tenant_store.get_settings("shop-1")
        await tenant_store.update_settings(settings.model_copy(update={"invoice_prefix": "F"}))

        assert await tenant_store.allocate_code("shop-1", "invoice") == "F00001"

    async def test_concurrent_allocations_unique(self, tenant_store):
        codes = await asyncio.gather(
            *(tenant_store.allocate_code("shop-1", CodeKind.JOB) for _ in range(10))
        )

        assert len(set(codes)) == 10
