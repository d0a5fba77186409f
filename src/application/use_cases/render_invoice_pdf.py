"""
Render Invoice PDF Use Case.

Generates a PDF document from an invoice's frozen snapshot.
"""

from dataclasses import dataclass

from src.config import get_logger
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces import IInvoiceStore, ITenantSettingsStore
from src.infrastructure.pdf.invoice_pdf_renderer import (
    Fpdf2InvoiceRenderer,
    IInvoicePdfRenderer,
)

logger = get_logger(__name__)


@dataclass
class InvoicePdfResult:
    """Result of invoice PDF generation."""

    pdf_bytes: bytes
    invoice_id: int
    filename: str
    file_size: int


class RenderInvoicePdfUseCase:
    """
    Use case for generating invoice PDFs.

    Flow:
    1. Load invoice from store
    2. Look up the tenant's currency
    3. Render PDF via the invoice renderer
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        tenant_store: ITenantSettingsStore | None = None,
        renderer: IInvoicePdfRenderer | None = None,
    ):
        self._invoice_store = invoice_store
        self._tenant_store = tenant_store
        self._renderer = renderer or Fpdf2InvoiceRenderer()

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_tenant_store(self) -> ITenantSettingsStore:
        if self._tenant_store is None:
            from src.infrastructure.storage.sqlite import get_tenant_store

            self._tenant_store = await get_tenant_store()
        return self._tenant_store

    async def execute(self, tenant_id: str, invoice_id: int) -> InvoicePdfResult:
        """
        Generate an invoice PDF.

        Raises:
            InvoiceNotFoundError: If the invoice does not exist for the tenant.
        """
        logger.info("render_invoice_pdf_started", tenant_id=tenant_id, invoice_id=invoice_id)

        store = await self._get_invoice_store()
        invoice = await store.get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        tenant_store = await self._get_tenant_store()
        currency = (await tenant_store.get_settings(tenant_id)).currency

        pdf_bytes = self._renderer.render(invoice, currency=currency)
        filename = f"{invoice.code or f'invoice_{invoice_id}'}.pdf"

        logger.info(
            "render_invoice_pdf_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            file_size=len(pdf_bytes),
        )

        return InvoicePdfResult(
            pdf_bytes=pdf_bytes,
            invoice_id=invoice_id,
            filename=filename,
            file_size=len(pdf_bytes),
        )
