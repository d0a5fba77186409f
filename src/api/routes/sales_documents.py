"""Quote and job endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_complete_job_use_case,
    get_convert_quote_use_case,
    get_documents,
    get_generate_invoice_use_case,
    get_save_sales_document_use_case,
    get_tenant_id,
)
from src.application.dto.mappers import document_to_response
from src.application.dto.requests import GenerateInvoiceRequest, SalesDocumentRequest
from src.application.dto.responses import (
    CompleteJobResponse,
    ConvertQuoteResponse,
    ErrorResponse,
    InvoiceResponse,
    SalesDocumentListResponse,
    SalesDocumentResponse,
)
from src.application.use_cases import (
    CompleteJobUseCase,
    ConvertQuoteToJobUseCase,
    GenerateInvoiceUseCase,
    SaveSalesDocumentUseCase,
)
from src.core.entities.sales_document import DocumentKind, DocumentStatus
from src.core.exceptions import SalesDocumentNotFoundError
from src.core.interfaces import ISalesDocumentStore

quotes_router = APIRouter(prefix="/api/quotes", tags=["quotes"])
jobs_router = APIRouter(prefix="/api/jobs", tags=["jobs"])


async def _list(
    store: ISalesDocumentStore,
    tenant_id: str,
    kind: DocumentKind,
    status_filter: DocumentStatus | None,
    limit: int,
    offset: int,
) -> SalesDocumentListResponse:
    # Fetch one extra row to know whether another page exists
    rows = await store.list_documents(
        tenant_id, kind, status=status_filter, limit=limit + 1, offset=offset
    )
    page = rows[:limit]
    return SalesDocumentListResponse(
        items=[document_to_response(d) for d in page],
        total=len(page),
        limit=limit,
        offset=offset,
        has_more=len(rows) > limit,
    )


async def _get(
    store: ISalesDocumentStore, tenant_id: str, kind: DocumentKind, document_id: int
) -> SalesDocumentResponse:
    document = await store.get_document(tenant_id, kind, document_id)
    if document is None:
        raise SalesDocumentNotFoundError(kind.value, document_id)
    return document_to_response(document)


# --- Quotes ---


@quotes_router.post(
    "",
    response_model=SalesDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_quote(
    request: SalesDocumentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: SaveSalesDocumentUseCase = Depends(get_save_sales_document_use_case),
) -> SalesDocumentResponse:
    """Create a quote; totals are computed from live rates and prices."""
    result = await use_case.execute(tenant_id, DocumentKind.QUOTE, request)
    return use_case.to_response(result)


@quotes_router.get("", response_model=SalesDocumentListResponse)
async def list_quotes(
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: ISalesDocumentStore = Depends(get_documents),
) -> SalesDocumentListResponse:
    return await _list(store, tenant_id, DocumentKind.QUOTE, status_filter, limit, offset)


@quotes_router.get(
    "/{quote_id}",
    response_model=SalesDocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_quote(
    quote_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: ISalesDocumentStore = Depends(get_documents),
) -> SalesDocumentResponse:
    return await _get(store, tenant_id, DocumentKind.QUOTE, quote_id)


@quotes_router.put(
    "/{quote_id}",
    response_model=SalesDocumentResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_quote(
    quote_id: int,
    request: SalesDocumentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: SaveSalesDocumentUseCase = Depends(get_save_sales_document_use_case),
) -> SalesDocumentResponse:
    """Replace a quote's items; totals are recomputed."""
    result = await use_case.execute(tenant_id, DocumentKind.QUOTE, request, document_id=quote_id)
    return use_case.to_response(result)


@quotes_router.post(
    "/{quote_id}/convert",
    response_model=ConvertQuoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def convert_quote(
    quote_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: ConvertQuoteToJobUseCase = Depends(get_convert_quote_use_case),
) -> ConvertQuoteResponse:
    """Turn an open quote into a job."""
    result = await use_case.execute(tenant_id, quote_id)
    return use_case.to_response(result)


# --- Jobs ---


@jobs_router.post(
    "",
    response_model=SalesDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_job(
    request: SalesDocumentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: SaveSalesDocumentUseCase = Depends(get_save_sales_document_use_case),
) -> SalesDocumentResponse:
    """Create a job directly, without a quote."""
    result = await use_case.execute(tenant_id, DocumentKind.JOB, request)
    return use_case.to_response(result)


@jobs_router.get("", response_model=SalesDocumentListResponse)
async def list_jobs(
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: ISalesDocumentStore = Depends(get_documents),
) -> SalesDocumentListResponse:
    return await _list(store, tenant_id, DocumentKind.JOB, status_filter, limit, offset)


@jobs_router.get(
    "/{job_id}",
    response_model=SalesDocumentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_job(
    job_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: ISalesDocumentStore = Depends(get_documents),
) -> SalesDocumentResponse:
    return await _get(store, tenant_id, DocumentKind.JOB, job_id)


@jobs_router.put(
    "/{job_id}",
    response_model=SalesDocumentResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_job(
    job_id: int,
    request: SalesDocumentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: SaveSalesDocumentUseCase = Depends(get_save_sales_document_use_case),
) -> SalesDocumentResponse:
    result = await use_case.execute(tenant_id, DocumentKind.JOB, request, document_id=job_id)
    return use_case.to_response(result)


@jobs_router.post(
    "/{job_id}/complete",
    response_model=CompleteJobResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def complete_job(
    job_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CompleteJobUseCase = Depends(get_complete_job_use_case),
) -> CompleteJobResponse:
    """Complete a job and deduct its materials from stock."""
    result = await use_case.execute(tenant_id, job_id)
    return use_case.to_response(result)


@jobs_router.post(
    "/{job_id}/invoice",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def invoice_job(
    job_id: int,
    request: GenerateInvoiceRequest | None = None,
    tenant_id: str = Depends(get_tenant_id),
    use_case: GenerateInvoiceUseCase = Depends(get_generate_invoice_use_case),
) -> InvoiceResponse:
    """Generate an invoice from a completed job's frozen totals."""
    invoice = await use_case.execute(tenant_id, job_id, request)
    return use_case.to_response(invoice)
