"""Invoice editing use cases: adjustments and payment."""

from datetime import UTC, datetime

from src.application.dto.mappers import invoice_to_response
from src.application.dto.requests import UpdateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceStatus
from src.core.exceptions import (
    InvalidStatusTransitionError,
    InvoiceLockedError,
    InvoiceNotFoundError,
)
from src.core.interfaces import IInvoiceStore

logger = get_logger(__name__)


class _InvoiceUseCase:
    def __init__(self, invoice_store: IInvoiceStore | None = None):
        self._invoice_store = invoice_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _load(self, tenant_id: str, invoice_id: int) -> Invoice:
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        return invoice_to_response(invoice)


class UpdateInvoiceUseCase(_InvoiceUseCase):
    """
    Edit invoice-only fields (discount, tax rate, deposit, memo).

    The snapshot is untouched; totals are re-derived from it. Paid
    invoices are read-only.
    """

    async def execute(
        self, tenant_id: str, invoice_id: int, request: UpdateInvoiceRequest
    ) -> Invoice:
        logger.info("update_invoice_started", tenant_id=tenant_id, invoice_id=invoice_id)

        invoice = await self._load(tenant_id, invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            raise InvoiceLockedError(invoice_id)

        changes = request.adjustment_changes()
        if changes:
            invoice = invoice.with_adjustments(**changes)

        header = {
            name: getattr(request, name)
            for name in ("title", "customer_name", "memo")
            if name in request.model_fields_set
        }
        if header.get("title") is None:
            header.pop("title", None)
        if header:
            invoice = invoice.model_copy(update=header)

        store = await self._get_invoice_store()
        invoice = await store.update_invoice(invoice)

        logger.info(
            "update_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            changed=sorted([*changes, *header]),
            total_due=invoice.totals.total_due,
        )
        return invoice


class MarkInvoicePaidUseCase(_InvoiceUseCase):
    """Move an unpaid invoice to paid."""

    async def execute(self, tenant_id: str, invoice_id: int) -> Invoice:
        logger.info("mark_invoice_paid_started", tenant_id=tenant_id, invoice_id=invoice_id)

        invoice = await self._load(tenant_id, invoice_id)
        if invoice.status != InvoiceStatus.UNPAID:
            raise InvalidStatusTransitionError(
                "invoice", invoice_id, invoice.status.value, InvoiceStatus.PAID.value
            )

        store = await self._get_invoice_store()
        invoice = await store.update_invoice(
            invoice.model_copy(
                update={"status": InvoiceStatus.PAID, "paid_at": datetime.now(UTC)}
            )
        )

        logger.info(
            "mark_invoice_paid_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            total=invoice.totals.total,
        )
        return invoice
