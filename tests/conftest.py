"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from itertools import count
from unittest.mock import AsyncMock

import pytest

from src.application.services import DocumentPricer, reset_services
from src.config import reset_settings
from src.core.entities import (
    AddonLine,
    BillingMode,
    DocumentStatus,
    Equipment,
    EquipmentLine,
    InkRates,
    LaborLine,
    LineItems,
    Material,
    MaterialLine,
    SalesDocument,
    TenantSettings,
)
from src.core.services.numbering import CodeKind, default_prefix, format_code

TENANT = "tenant-a"


@pytest.fixture(autouse=True)
def _fresh_singletons() -> Iterator[None]:
    """Settings and service singletons never leak between tests."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def tenant_id() -> str:
    return TENANT


@pytest.fixture
def uv_printer() -> Equipment:
    """UV printer with per-channel ink rates."""
    return Equipment(
        id="eq-uv",
        tenant_id=TENANT,
        name="Mimaki UJF",
        type="UV Printer",
        ink_rates=InkRates(c=0.5, m=0.4, y=0.45, k=0.3, white=0.3, soft_white=0.6, gloss=0.8),
    )


@pytest.fixture
def laser_cutter() -> Equipment:
    """Hourly laser cutter."""
    return Equipment(
        id="eq-laser",
        tenant_id=TENANT,
        name="Laser Cutter",
        type="Laser Cutter",
        mode=BillingMode.HOURLY,
        hourly_rate=40.0,
        flat_fee=25.0,
    )


@pytest.fixture
def acrylic() -> Material:
    return Material(
        id="mat-acrylic",
        tenant_id=TENANT,
        name="Acrylic sheet 3mm",
        unit="sheet",
        purchase_price=12.0,
        selling_price=20.0,
        on_hand=50.0,
    )


@pytest.fixture
def sample_items() -> LineItems:
    """
    One line of every kind.

    With the fixtures above and a 50% margin:
    ink 9.40 raw / 14.10 charged, laser 2h x 40 = 80, acrylic 3 sheets
    36 cost / 60 charged, labor 1.5h x 30 = 45, add-on 2 x 7.5 = 15.
    """
    return LineItems(
        equipment=[
            EquipmentLine(
                equipment_id="eq-uv",
                inks={"c": 10, "m": 5, "white": 8, "soft_white": 4},
                use_soft_white=False,
            ),
            EquipmentLine(equipment_id="eq-laser", mode="hourly", hours=2),
        ],
        materials=[MaterialLine(material_id="mat-acrylic", qty=3)],
        labor=[LaborLine(description="Assembly", hours=1.5, rate=30)],
        addons=[AddonLine(name="Stand", qty=2, price=7.5)],
    )


# Store mocks

INK_CATEGORIES = frozenset({"UV Printer", "Sublimation Printer"})


@pytest.fixture
def mock_catalog_store(uv_printer, laser_cutter, acrylic):
    """Catalog store serving the shared equipment and material fixtures."""
    equipment = {e.id: e for e in (uv_printer, laser_cutter)}
    materials = {acrylic.id: acrylic}

    store = AsyncMock()
    store.get_equipment_by_ids.side_effect = lambda tenant_id, ids: {
        i: equipment[i] for i in ids if i in equipment
    }
    store.get_materials_by_ids.side_effect = lambda tenant_id, ids: {
        i: materials[i] for i in ids if i in materials
    }
    store.adjust_stock.side_effect = lambda tenant_id, material_id, delta: materials[
        material_id
    ].model_copy(update={"on_hand": materials[material_id].on_hand + delta})
    return store


@pytest.fixture
def mock_document_store(acrylic):
    """Document store that assigns sequential ids and echoes updates."""
    ids = count(1)
    stock = {acrylic.id: acrylic.on_hand}

    def complete_job(tenant_id, job_id, totals, consumption):
        job = store.get_document.return_value.model_copy(
            update={"status": DocumentStatus.COMPLETED, "totals": totals}
        )
        on_hand = {m: stock[m] - qty for m, qty in consumption.items() if m in stock}
        return job, on_hand

    store = AsyncMock()
    store.create_document.side_effect = lambda doc: doc.model_copy(update={"id": next(ids)})
    store.update_document.side_effect = lambda doc: doc
    store.complete_job.side_effect = complete_job
    store.get_document.return_value = None
    return store


@pytest.fixture
def tenant_settings(tenant_id) -> TenantSettings:
    return TenantSettings(tenant_id=tenant_id, tax_rate=8.0, default_margin_pct=50.0)


@pytest.fixture
def mock_tenant_store(tenant_settings):
    counters = {kind: count(1) for kind in CodeKind}
    store = AsyncMock()
    store.get_settings.return_value = tenant_settings
    store.allocate_code.side_effect = lambda tenant_id, kind: format_code(
        default_prefix(kind), next(counters[CodeKind(kind)])
    )
    return store


@pytest.fixture
def mock_invoice_store():
    ids = count(1)
    store = AsyncMock()
    store.create_invoice.side_effect = lambda inv: inv.model_copy(update={"id": next(ids)})
    store.update_invoice.side_effect = lambda inv: inv
    store.get_invoice.return_value = None
    return store


@pytest.fixture
def pricer(mock_catalog_store) -> DocumentPricer:
    return DocumentPricer(catalog_store=mock_catalog_store, ink_categories=INK_CATEGORIES)


@pytest.fixture
def make_document(tenant_id, sample_items):
    """Factory for stored quotes/jobs."""

    def _make(kind="quote", status=None, document_id=1, **fields) -> SalesDocument:
        values = {
            "id": document_id,
            "tenant_id": tenant_id,
            "kind": kind,
            "code": f"{'Q' if kind == 'quote' else 'J'}-{document_id:05d}",
            "title": "Window graphics",
            "customer_name": "Corner Cafe",
            "margin_pct": 50,
            "items": sample_items,
            "status": status,
        }
        values.update(fields)
        return SalesDocument(**values)

    return _make
