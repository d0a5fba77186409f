"""
Invoice endpoints.

Invoices are created from completed jobs (see ``POST /api/jobs/{id}/invoice``)
and afterwards only their adjustments and status change.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from src.api.dependencies import (
    get_invoices,
    get_mark_invoice_paid_use_case,
    get_reconcile_invoice_use_case,
    get_render_invoice_pdf_use_case,
    get_tenant_id,
    get_update_invoice_use_case,
)
from src.application.dto.mappers import invoice_to_response
from src.application.dto.requests import UpdateInvoiceRequest
from src.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
    ReconciliationResponse,
)
from src.application.use_cases import (
    MarkInvoicePaidUseCase,
    ReconcileInvoiceUseCase,
    RenderInvoicePdfUseCase,
    UpdateInvoiceUseCase,
)
from src.core.entities.invoice import InvoiceStatus
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces import IInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    status_filter: InvoiceStatus | None = Query(default=None, alias="status"),
    job_id: int | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceListResponse:
    """List invoices, optionally filtered by status or source job."""
    rows = await store.list_invoices(
        tenant_id, status=status_filter, job_id=job_id, limit=limit + 1, offset=offset
    )
    page = rows[:limit]
    return InvoiceListResponse(
        items=[invoice_to_response(i) for i in page],
        total=len(page),
        limit=limit,
        offset=offset,
        has_more=len(rows) > limit,
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    tenant_id: str = Depends(get_tenant_id),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceResponse:
    invoice = await store.get_invoice(tenant_id, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return invoice_to_response(invoice)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """
    Change discount, tax rate, deposit or memo.

    Totals are recomputed from the frozen snapshot. Paid invoices
    are rejected with 409.
    """
    invoice = await use_case.execute(tenant_id, invoice_id, request)
    return use_case.to_response(invoice)


@router.post(
    "/{invoice_id}/paid",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_invoice_paid(
    invoice_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: MarkInvoicePaidUseCase = Depends(get_mark_invoice_paid_use_case),
) -> InvoiceResponse:
    invoice = await use_case.execute(tenant_id, invoice_id)
    return use_case.to_response(invoice)


@router.get(
    "/{invoice_id}/reconcile",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_invoice(
    invoice_id: int,
    tenant_id: str = Depends(get_tenant_id),
    use_case: ReconcileInvoiceUseCase = Depends(get_reconcile_invoice_use_case),
) -> ReconciliationResponse:
    """Compare the invoice snapshot with a re-pricing at today's rates."""
    result = await use_case.execute(tenant_id, invoice_id)
    return use_case.to_response(result)


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def download_invoice_pdf(
    invoice_id: int,
    inline: bool = Query(default=False, description="Display instead of download"),
    tenant_id: str = Depends(get_tenant_id),
    use_case: RenderInvoicePdfUseCase = Depends(get_render_invoice_pdf_use_case),
) -> Response:
    """Render the invoice as a PDF."""
    result = await use_case.execute(tenant_id, invoice_id)
    disposition = "inline" if inline else "attachment"
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'{disposition}; filename="{result.filename}"',
        },
    )
