"""Generate Invoice Use Case: freeze a completed job into an invoice."""

from src.application.dto.mappers import invoice_to_response
from src.application.dto.requests import GenerateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceAdjustments
from src.core.entities.sales_document import DocumentKind, DocumentStatus
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError
from src.core.interfaces import IInvoiceStore, ISalesDocumentStore, ITenantSettingsStore
from src.core.services.numbering import CodeKind

logger = get_logger(__name__)


class GenerateInvoiceUseCase:
    """
    Create an unpaid invoice from a completed job.

    The job's items and totals are copied into the invoice and never
    re-read; later price changes do not alter issued invoices. The tax
    rate defaults to the tenant's current rate. A job may be invoiced more
    than once (partial billing).
    """

    def __init__(
        self,
        document_store: ISalesDocumentStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        tenant_store: ITenantSettingsStore | None = None,
    ):
        self._document_store = document_store
        self._invoice_store = invoice_store
        self._tenant_store = tenant_store

    async def _get_document_store(self) -> ISalesDocumentStore:
        if self._document_store is None:
            from src.infrastructure.storage.sqlite import get_sales_document_store

            self._document_store = await get_sales_document_store()
        return self._document_store

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

    async def execute(
        self,
        tenant_id: str,
        job_id: int,
        request: GenerateInvoiceRequest | None = None,
    ) -> Invoice:
        request = request or GenerateInvoiceRequest()
        logger.info("generate_invoice_started", tenant_id=tenant_id, job_id=job_id)

        document_store = await self._get_document_store()
        invoice_store = await self._get_invoice_store()
        tenant_store = await self._get_tenant_store()

        job = await document_store.get_document(tenant_id, DocumentKind.JOB, job_id)
        if job is None:
            raise SalesDocumentNotFoundError(DocumentKind.JOB.value, job_id)
        if job.status != DocumentStatus.COMPLETED:
            raise InvalidStatusTransitionError(
                "job", job_id, job.status.value, "invoiced"
            )

        tax_rate_pct = request.tax_rate_pct
        if tax_rate_pct is None:
            tax_rate_pct = (await tenant_store.get_settings(tenant_id)).tax_rate

        code = await tenant_store.allocate_code(tenant_id, CodeKind.INVOICE)
        invoice = Invoice(
            tenant_id=tenant_id,
            code=code,
            job_id=job.id,
            title=job.title,
            customer_name=job.customer_name,
            items=job.items.model_copy(deep=True),
            snapshot=job.totals.model_copy(),
            adjustments=InvoiceAdjustments(
                discount_type=request.discount_type,
                discount_value=request.discount_value,
                apply_tax_to_discount=request.apply_tax_to_discount,
                deposit=request.deposit,
                tax_rate_pct=tax_rate_pct,
            ),
            memo=request.memo,
        )
        invoice = await invoice_store.create_invoice(invoice)

        logger.info(
            "generate_invoice_complete",
            tenant_id=tenant_id,
            job_id=job_id,
            invoice_id=invoice.id,
            code=invoice.code,
            total=invoice.totals.total,
            total_due=invoice.totals.total_due,
        )
        return invoice

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        return invoice_to_response(invoice)
