"""Reconcile Invoice Use Case: compare a frozen invoice with live prices."""

from dataclasses import dataclass, field

from src.application.dto.responses import ReconciliationResponse
from src.application.services import DocumentPricer, get_document_pricer
from src.config import get_logger
from src.core.entities.sales_document import DocumentKind
from src.core.entities.totals import DocumentTotals
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces import IInvoiceStore, ISalesDocumentStore, ITenantSettingsStore
from src.core.numeric import round_money

logger = get_logger(__name__)

# Differences below half a cent are rounding noise
_TOLERANCE = 0.005


@dataclass
class ReconciliationResult:
    invoice_id: int
    snapshot: DocumentTotals
    live: DocumentTotals
    delta: dict[str, float] = field(default_factory=dict)
    missing_equipment: list[str] = field(default_factory=list)
    missing_materials: list[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not self.delta


def totals_delta(snapshot: DocumentTotals, live: DocumentTotals) -> dict[str, float]:
    """``live - snapshot`` for every field that moved by at least a cent."""
    before = snapshot.model_dump()
    after = live.model_dump()
    delta = {}
    for name, value in after.items():
        diff = value - before.get(name, 0.0)
        if abs(diff) >= _TOLERANCE:
            delta[name] = round_money(diff)
    return delta


class ReconcileInvoiceUseCase:
    """
    Re-price an invoice's frozen items against current reference data.

    Read-only: the invoice keeps its snapshot. The margin comes from the
    source job, or the tenant default when the job is gone.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        document_store: ISalesDocumentStore | None = None,
        tenant_store: ITenantSettingsStore | None = None,
        pricer: DocumentPricer | None = None,
    ):
        self._invoice_store = invoice_store
        self._document_store = document_store
        self._tenant_store = tenant_store
        self._pricer = pricer

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_document_store(self) -> ISalesDocumentStore:
        if self._document_store is None:
            from src.infrastructure.storage.sqlite import get_sales_document_store

            self._document_store = await get_sales_document_store()
        return self._document_store

    async def _get_tenant_store(self) -> ITenantSettingsStore:
        if self._tenant_store is None:
            from src.infrastructure.storage.sqlite import get_tenant_store

            self._tenant_store = await get_tenant_store()
        return self._tenant_store

    def _get_pricer(self) -> DocumentPricer:
        if self._pricer is None:
            self._pricer = get_document_pricer()
        return self._pricer

    async def execute(self, tenant_id: str, invoice_id: int) -> ReconciliationResult:
        logger.info("reconcile_invoice_started", tenant_id=tenant_id, invoice_id=invoice_id)

        invoice_store = await self._get_invoice_store()
        invoice = await invoice_store.get_invoice(tenant_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        margin_pct = None
        if invoice.job_id is not None:
            document_store = await self._get_document_store()
            job = await document_store.get_document(tenant_id, DocumentKind.JOB, invoice.job_id)
            if job is not None:
                margin_pct = job.margin_pct
        if margin_pct is None:
            tenant_store = await self._get_tenant_store()
            margin_pct = (await tenant_store.get_settings(tenant_id)).default_margin_pct

        pricing = await self._get_pricer().price(tenant_id, invoice.items, margin_pct)

        result = ReconciliationResult(
            invoice_id=invoice_id,
            snapshot=invoice.snapshot,
            live=pricing.totals,
            delta=totals_delta(invoice.snapshot, pricing.totals),
            missing_equipment=pricing.missing_equipment,
            missing_materials=pricing.missing_materials,
        )

        logger.info(
            "reconcile_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            in_sync=result.in_sync,
            changed_fields=len(result.delta),
        )
        return result

    def to_response(self, result: ReconciliationResult) -> ReconciliationResponse:
        return ReconciliationResponse(
            invoice_id=result.invoice_id,
            snapshot=result.snapshot,
            live=result.live,
            delta=result.delta,
            in_sync=result.in_sync,
            missing_equipment=result.missing_equipment,
            missing_materials=result.missing_materials,
        )
