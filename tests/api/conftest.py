"""API test fixtures: the app with every store and use case backed by mocks."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.api import dependencies as deps
from src.api.main import app
from src.application.use_cases import (
    CompleteJobUseCase,
    ConvertQuoteToJobUseCase,
    GenerateInvoiceUseCase,
    MarkInvoicePaidUseCase,
    PreviewTotalsUseCase,
    ReconcileInvoiceUseCase,
    RenderInvoicePdfUseCase,
    SaveSalesDocumentUseCase,
    UpdateInvoiceUseCase,
)
from src.config.settings import PdfSettings
from src.infrastructure.pdf.invoice_pdf_renderer import Fpdf2InvoiceRenderer


@pytest.fixture
def api_headers(tenant_id) -> dict[str, str]:
    return {"X-Tenant-ID": tenant_id}


@pytest.fixture
async def client(
    mock_catalog_store,
    mock_document_store,
    mock_invoice_store,
    mock_tenant_store,
    pricer,
) -> AsyncGenerator[AsyncClient, None]:
    """Async client with all storage dependencies overridden."""
    renderer = Fpdf2InvoiceRenderer(PdfSettings(company_name="Test Print Co"))

    app.dependency_overrides.update(
        {
            deps.get_catalog: lambda: mock_catalog_store,
            deps.get_documents: lambda: mock_document_store,
            deps.get_invoices: lambda: mock_invoice_store,
            deps.get_tenants: lambda: mock_tenant_store,
            deps.get_save_sales_document_use_case: lambda: SaveSalesDocumentUseCase(
                mock_document_store, mock_tenant_store, pricer
            ),
            deps.get_preview_totals_use_case: lambda: PreviewTotalsUseCase(
                mock_tenant_store, pricer
            ),
            deps.get_convert_quote_use_case: lambda: ConvertQuoteToJobUseCase(
                mock_document_store, mock_tenant_store
            ),
            deps.get_complete_job_use_case: lambda: CompleteJobUseCase(
                mock_document_store, mock_catalog_store, pricer
            ),
            deps.get_generate_invoice_use_case: lambda: GenerateInvoiceUseCase(
                mock_document_store, mock_invoice_store, mock_tenant_store
            ),
            deps.get_update_invoice_use_case: lambda: UpdateInvoiceUseCase(mock_invoice_store),
            deps.get_mark_invoice_paid_use_case: lambda: MarkInvoicePaidUseCase(
                mock_invoice_store
            ),
            deps.get_reconcile_invoice_use_case: lambda: ReconcileInvoiceUseCase(
                mock_invoice_store, mock_document_store, mock_tenant_store, pricer
            ),
            deps.get_render_invoice_pdf_use_case: lambda: RenderInvoicePdfUseCase(
                mock_invoice_store, mock_tenant_store, renderer
            ),
        }
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
