"""Save Sales Document Use Case: create or update a quote/job with fresh totals."""

from dataclasses import dataclass, field

from src.application.dto.mappers import document_to_response
from src.application.dto.requests import SalesDocumentRequest
from src.application.dto.responses import SalesDocumentResponse
from src.application.services import DocumentPricer, get_document_pricer
from src.config import get_logger
from src.core.entities.sales_document import (
    DocumentKind,
    DocumentStatus,
    SalesDocument,
)
from src.core.exceptions import DocumentLockedError, SalesDocumentNotFoundError
from src.core.interfaces import ISalesDocumentStore, ITenantSettingsStore
from src.core.services.numbering import CodeKind

logger = get_logger(__name__)

# Statuses in which items may still change
EDITABLE_STATUSES = {DocumentStatus.OPEN, DocumentStatus.ACTIVE}


@dataclass
class SaveSalesDocumentResult:
    """Result of saving a quote or job."""

    document: SalesDocument
    created: bool
    missing_equipment: list[str] = field(default_factory=list)
    missing_materials: list[str] = field(default_factory=list)


class SaveSalesDocumentUseCase:
    """
    Persist a quote or job.

    Totals are never taken from the client: every save re-prices the
    items against the tenant's live equipment rates and material prices.
    New documents get the next code of their kind.
    """

    def __init__(
        self,
        document_store: ISalesDocumentStore | None = None,
        tenant_store: ITenantSettingsStore | None = None,
        pricer: DocumentPricer | None = None,
    ):
        self._document_store = document_store
        self._tenant_store = tenant_store
        self._pricer = pricer

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

    async def execute(
        self,
        tenant_id: str,
        kind: DocumentKind,
        request: SalesDocumentRequest,
        document_id: int | None = None,
    ) -> SaveSalesDocumentResult:
        """Create (``document_id`` None) or update a quote/job."""
        kind = DocumentKind(kind)
        logger.info(
            "save_sales_document_started",
            tenant_id=tenant_id,
            kind=kind.value,
            document_id=document_id,
        )

        store = await self._get_document_store()
        tenant_store = await self._get_tenant_store()

        existing = None
        if document_id is not None:
            existing = await store.get_document(tenant_id, kind, document_id)
            if existing is None:
                raise SalesDocumentNotFoundError(kind.value, document_id)
            if existing.status not in EDITABLE_STATUSES:
                raise DocumentLockedError(kind.value, document_id, existing.status.value)

        margin_pct = request.margin_pct
        if margin_pct is None:
            if existing is not None:
                margin_pct = existing.margin_pct
            else:
                margin_pct = (await tenant_store.get_settings(tenant_id)).default_margin_pct

        pricing = await self._get_pricer().price(tenant_id, request.items, margin_pct)

        if existing is None:
            code = await tenant_store.allocate_code(tenant_id, CodeKind(kind.value))
            document = SalesDocument(
                tenant_id=tenant_id,
                kind=kind,
                code=code,
                title=request.title,
                customer_name=request.customer_name,
                margin_pct=margin_pct,
                items=request.items,
                totals=pricing.totals,
                notes=request.notes,
            )
            document = await store.create_document(document)
        else:
            document = existing.model_copy(
                update={
                    "title": request.title,
                    "customer_name": request.customer_name,
                    "margin_pct": margin_pct,
                    "items": request.items,
                    "totals": pricing.totals,
                    "notes": request.notes,
                }
            )
            document = await store.update_document(document)

        logger.info(
            "save_sales_document_complete",
            tenant_id=tenant_id,
            kind=kind.value,
            document_id=document.id,
            code=document.code,
            total=document.totals.total_charge_pre_tax,
            profit=document.totals.profit,
        )

        return SaveSalesDocumentResult(
            document=document,
            created=existing is None,
            missing_equipment=pricing.missing_equipment,
            missing_materials=pricing.missing_materials,
        )

    def to_response(self, result: SaveSalesDocumentResult) -> SalesDocumentResponse:
        """Convert result to API response."""
        return document_to_response(result.document)
