"""Convert Quote Use Case: turn an open quote into an active job."""

from dataclasses import dataclass

from src.application.dto.mappers import document_to_response
from src.application.dto.responses import ConvertQuoteResponse
from src.config import get_logger
from src.core.entities.sales_document import (
    DocumentKind,
    DocumentStatus,
    SalesDocument,
)
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError
from src.core.interfaces import ISalesDocumentStore, ITenantSettingsStore
from src.core.services.numbering import CodeKind

logger = get_logger(__name__)


@dataclass
class ConvertQuoteResult:
    """The converted quote and the job created from it."""

    quote: SalesDocument
    job: SalesDocument


class ConvertQuoteToJobUseCase:
    """Copy a quote's items and totals into a new job and close the quote."""

    def __init__(
        self,
        document_store: ISalesDocumentStore | None = None,
        tenant_store: ITenantSettingsStore | None = None,
    ):
        self._document_store = document_store
        self._tenant_store = tenant_store

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

    async def execute(self, tenant_id: str, quote_id: int) -> ConvertQuoteResult:
        logger.info("convert_quote_started", tenant_id=tenant_id, quote_id=quote_id)

        store = await self._get_document_store()
        tenant_store = await self._get_tenant_store()

        quote = await store.get_document(tenant_id, DocumentKind.QUOTE, quote_id)
        if quote is None:
            raise SalesDocumentNotFoundError(DocumentKind.QUOTE.value, quote_id)
        if quote.status != DocumentStatus.OPEN:
            raise InvalidStatusTransitionError(
                "quote", quote_id, quote.status.value, DocumentStatus.CONVERTED.value
            )

        code = await tenant_store.allocate_code(tenant_id, CodeKind.JOB)
        job = SalesDocument(
            tenant_id=tenant_id,
            kind=DocumentKind.JOB,
            code=code,
            title=quote.title,
            customer_name=quote.customer_name,
            margin_pct=quote.margin_pct,
            items=quote.items.model_copy(deep=True),
            totals=quote.totals.model_copy(),
            source_quote_id=quote.id,
            notes=quote.notes,
        )
        job = await store.create_document(job)

        quote = await store.update_document(
            quote.model_copy(update={"status": DocumentStatus.CONVERTED})
        )

        logger.info(
            "convert_quote_complete",
            tenant_id=tenant_id,
            quote_id=quote_id,
            job_id=job.id,
            job_code=job.code,
        )
        return ConvertQuoteResult(quote=quote, job=job)

    def to_response(self, result: ConvertQuoteResult) -> ConvertQuoteResponse:
        return ConvertQuoteResponse(
            quote=document_to_response(result.quote),
            job=document_to_response(result.job),
        )
