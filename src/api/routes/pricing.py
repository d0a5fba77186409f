"""Stateless totals previews used while a document is being edited."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_preview_totals_use_case, get_tenant_id
from src.application.dto.requests import DocumentPricingRequest, InvoicePricingRequest
from src.application.dto.responses import (
    DocumentPricingResponse,
    ErrorResponse,
    InvoicePricingResponse,
)
from src.application.use_cases import PreviewTotalsUseCase

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.post(
    "/document",
    response_model=DocumentPricingResponse,
    responses={400: {"model": ErrorResponse}},
)
async def preview_document_totals(
    request: DocumentPricingRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: PreviewTotalsUseCase = Depends(get_preview_totals_use_case),
) -> DocumentPricingResponse:
    """
    Price quote or job lines against the tenant's catalog.

    Unknown equipment or material ids contribute nothing and are listed
    in the response so the editor can flag them.
    """
    return await use_case.preview_document(tenant_id, request)


@router.post(
    "/invoice",
    response_model=InvoicePricingResponse,
    responses={400: {"model": ErrorResponse}},
)
async def preview_invoice_totals(
    request: InvoicePricingRequest,
    use_case: PreviewTotalsUseCase = Depends(get_preview_totals_use_case),
) -> InvoicePricingResponse:
    """Apply discount, tax and deposit to a pre-tax snapshot."""
    return use_case.preview_invoice(request)
