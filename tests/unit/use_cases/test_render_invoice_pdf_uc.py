"""Tests for RenderInvoicePdfUseCase."""

from unittest.mock import MagicMock

import pytest

from src.application.use_cases.render_invoice_pdf import RenderInvoicePdfUseCase
from src.core.entities import DocumentTotals, Invoice
from src.core.exceptions import InvoiceNotFoundError


@pytest.fixture
def renderer():
    mock = MagicMock()
    mock.render.return_value = b"%PDF-1.4 fake"
    return mock


@pytest.fixture
def invoice(tenant_id) -> Invoice:
    return Invoice(
        id=12,
        tenant_id=tenant_id,
        code="INV-00012",
        title="Vehicle wrap",
        snapshot=DocumentTotals(total_charge_pre_tax=500),
    )


class TestRenderInvoicePdfUseCase:
    async def test_renders_with_tenant_currency(
        self, mock_invoice_store, mock_tenant_store, renderer, invoice, tenant_id
    ):
        mock_invoice_store.get_invoice.return_value = invoice
        use_case = RenderInvoicePdfUseCase(
            invoice_store=mock_invoice_store,
            tenant_store=mock_tenant_store,
            renderer=renderer,
        )

        result = await use_case.execute(tenant_id, 12)

        assert result.pdf_bytes.startswith(b"%PDF")
        assert result.filename == "INV-00012.pdf"
        assert result.file_size == len(result.pdf_bytes)
        renderer.render.assert_called_once_with(invoice, currency="USD")

    async def test_filename_without_code(
        self, mock_invoice_store, mock_tenant_store, renderer, invoice, tenant_id
    ):
        mock_invoice_store.get_invoice.return_value = invoice.model_copy(update={"code": None})
        use_case = RenderInvoicePdfUseCase(
            invoice_store=mock_invoice_store,
            tenant_store=mock_tenant_store,
            renderer=renderer,
        )

        result = await use_case.execute(tenant_id, 12)

        assert result.filename == "invoice_12.pdf"

    async def test_missing_invoice(self, mock_invoice_store, mock_tenant_store, renderer, tenant_id):
        use_case = RenderInvoicePdfUseCase(
            invoice_store=mock_invoice_store,
            tenant_store=mock_tenant_store,
            renderer=renderer,
        )

        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute(tenant_id, 12)
        renderer.render.assert_not_called()
