"""Tests for SQLiteSalesDocumentStore."""

import asyncio
import sqlite3

import pytest

from src.core.entities import (
    DocumentKind,
    DocumentStatus,
    DocumentTotals,
    LineItems,
    Material,
    SalesDocument,
)
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError

TENANT = "tenant-a"


def _quote(**overrides) -> SalesDocument:
    values = {
        "tenant_id": TENANT,
        "kind": DocumentKind.QUOTE,
        "code": "Q-00001",
        "title": "Window graphics",
        "customer_name": "Corner Cafe",
        "margin_pct": 50,
        "items": LineItems.model_validate(
            {
                "equipment": [
                    {"equipment_id": "eq-uv", "inks": {"c": 10, "white": 8}, "use_soft_white": False}
                ],
                "labor": [{"desc": "Weeding", "hours": 1, "rate": 30}],
            }
        ),
        "totals": DocumentTotals(ink_cost_raw=9.4, ink_charge=14.1, total_charge_pre_tax=44.1),
    }
    values.update(overrides)
    return SalesDocument(**values)


class TestSalesDocumentStore:
    async def test_create_round_trips_items_and_totals(self, document_store):
        created = await document_store.create_document(_quote())

        fetched = await document_store.get_document(TENANT, DocumentKind.QUOTE, created.id)

        assert fetched.id == created.id
        assert fetched.status == DocumentStatus.OPEN
        assert fetched.items.equipment[0].usage("white") == 8
        assert fetched.items.equipment[0].use_soft_white is False
        assert fetched.items.labor[0].description == "Weeding"
        assert fetched.totals.ink_charge == 14.1

    async def test_kind_is_part_of_the_key(self, document_store):
        created = await document_store.create_document(_quote())

        assert await document_store.get_document(TENANT, DocumentKind.JOB, created.id) is None

    async def test_tenant_isolation(self, document_store):
        created = await document_store.create_document(_quote())

        assert await document_store.get_document("tenant-b", "quote", created.id) is None
        assert await document_store.list_documents("tenant-b", DocumentKind.QUOTE) == []

    async def test_list_newest_first_with_status_filter(self, document_store):
        first = await document_store.create_document(_quote(code="Q-00001"))
        second = await document_store.create_document(_quote(code="Q-00002"))
        await document_store.update_document(
            first.model_copy(update={"status": DocumentStatus.CONVERTED})
        )

        everything = await document_store.list_documents(TENANT, DocumentKind.QUOTE)
        open_only = await document_store.list_documents(
            TENANT, DocumentKind.QUOTE, status=DocumentStatus.OPEN
        )

        assert [d.id for d in everything] == [second.id, first.id]
        assert [d.id for d in open_only] == [second.id]

    async def test_pagination(self, document_store):
        for n in range(3):
            await document_store.create_document(_quote(code=f"Q-{n:05d}"))

        page = await document_store.list_documents(TENANT, DocumentKind.QUOTE, limit=2, offset=2)

        assert len(page) == 1

    async def test_job_keeps_source_quote(self, document_store):
        quote = await document_store.create_document(_quote())
        job = await document_store.create_document(
            _quote(kind=DocumentKind.JOB, code="J-00001", source_quote_id=quote.id)
        )

        assert job.status == DocumentStatus.ACTIVE
        assert job.source_quote_id == quote.id

    async def test_update(self, document_store):
        created = await document_store.create_document(_quote())

        updated = await document_store.update_document(
            created.model_copy(
                update={"title": "Window graphics v2", "totals": DocumentTotals(profit=1.5)}
            )
        )

        assert updated.title == "Window graphics v2"
        assert updated.totals.profit == 1.5
        assert updated.code == "Q-00001"

    async def test_update_missing(self, document_store):
        with pytest.raises(SalesDocumentNotFoundError):
            await document_store.update_document(_quote(id=999))


@pytest.fixture
async def stocked(catalog_store) -> tuple[str, str]:
    acrylic = await catalog_store.create_material(
        Material(tenant_id=TENANT, name="Acrylic 3mm", on_hand=10)
    )
    vinyl = await catalog_store.create_material(
        Material(tenant_id=TENANT, name="Vinyl roll", on_hand=5)
    )
    return acrylic.id, vinyl.id


@pytest.fixture
async def active_job(document_store) -> SalesDocument:
    return await document_store.create_document(_quote(kind=DocumentKind.JOB, code="J-00001"))


class TestCompleteJob:
    async def test_status_totals_and_stock_change_together(
        self, document_store, stocked, active_job
    ):
        acrylic, vinyl = stocked

        job, on_hand = await document_store.complete_job(
            TENANT,
            active_job.id,
            DocumentTotals(total_charge_pre_tax=99.5),
            {acrylic: 3, vinyl: 1.5, "mat-gone": 2},
        )

        assert job.status == DocumentStatus.COMPLETED
        assert job.totals.total_charge_pre_tax == 99.5
        assert on_hand == {acrylic: 7.0, vinyl: 3.5}

    async def test_failed_deduction_rolls_everything_back(
        self, document_store, catalog_store, stocked, active_job
    ):
        acrylic, vinyl = stocked

        # The second deduction cannot be bound, after the first already ran
        with pytest.raises(sqlite3.Error):
            await document_store.complete_job(
                TENANT, active_job.id, DocumentTotals(), {acrylic: 2.0, vinyl: object()}
            )

        assert (await catalog_store.get_material(TENANT, acrylic)).on_hand == 10.0
        assert (await catalog_store.get_material(TENANT, vinyl)).on_hand == 5.0
        job = await document_store.get_document(TENANT, DocumentKind.JOB, active_job.id)
        assert job.status == DocumentStatus.ACTIVE

    async def test_second_completion_is_rejected_and_deducts_nothing(
        self, document_store, catalog_store, stocked, active_job
    ):
        acrylic, _ = stocked
        await document_store.complete_job(TENANT, active_job.id, DocumentTotals(), {acrylic: 4})

        with pytest.raises(InvalidStatusTransitionError):
            await document_store.complete_job(
                TENANT, active_job.id, DocumentTotals(), {acrylic: 4}
            )

        assert (await catalog_store.get_material(TENANT, acrylic)).on_hand == 6.0

    async def test_concurrent_completions_deduct_once(
        self, document_store, catalog_store, stocked, active_job
    ):
        acrylic, _ = stocked

        results = await asyncio.gather(
            document_store.complete_job(TENANT, active_job.id, DocumentTotals(), {acrylic: 4}),
            document_store.complete_job(TENANT, active_job.id, DocumentTotals(), {acrylic: 4}),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidStatusTransitionError)
        assert (await catalog_store.get_material(TENANT, acrylic)).on_hand == 6.0

    async def test_quote_cannot_be_completed(self, document_store):
        quote = await document_store.create_document(_quote())

        with pytest.raises(SalesDocumentNotFoundError):
            await document_store.complete_job(TENANT, quote.id, DocumentTotals(), {})

    async def test_other_tenant_cannot_complete(self, document_store, active_job):
        with pytest.raises(SalesDocumentNotFoundError):
            await document_store.complete_job("tenant-b", active_job.id, DocumentTotals(), {})
