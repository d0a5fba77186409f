"""
Dependency injection container for FastAPI.

Provides tenant resolution, stores and use cases to route handlers.
"""

from functools import lru_cache

from fastapi import Request

from src.application.use_cases import (
    CompleteJobUseCase,
    ConvertQuoteToJobUseCase,
    GenerateInvoiceUseCase,
    MarkInvoicePaidUseCase,
    PreviewTotalsUseCase,
    ReconcileInvoiceUseCase,
    RenderInvoicePdfUseCase,
    SaveSalesDocumentUseCase,
    UpdateInvoiceUseCase,
)
from src.config import Settings, get_settings
from src.core.exceptions import MissingTenantError
from src.core.interfaces import (
    ICatalogStore,
    IInvoiceStore,
    ISalesDocumentStore,
    ITenantSettingsStore,
)
from src.infrastructure.storage.sqlite import (
    get_catalog_store,
    get_invoice_store,
    get_sales_document_store,
    get_tenant_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Tenant
def get_tenant_id(request: Request) -> str:
    """Resolve the tenant from the configured header (default X-Tenant-ID)."""
    header = get_settings().api.tenant_header
    tenant_id = (request.headers.get(header) or "").strip()
    if not tenant_id:
        raise MissingTenantError(header)
    return tenant_id


# Store dependencies
async def get_catalog() -> ICatalogStore:
    """Get equipment/materials store."""
    return await get_catalog_store()


async def get_documents() -> ISalesDocumentStore:
    """Get quote/job store."""
    return await get_sales_document_store()


async def get_invoices() -> IInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_tenants() -> ITenantSettingsStore:
    """Get tenant settings store."""
    return await get_tenant_store()


# Use case dependencies
def get_save_sales_document_use_case() -> SaveSalesDocumentUseCase:
    return SaveSalesDocumentUseCase()


def get_preview_totals_use_case() -> PreviewTotalsUseCase:
    return PreviewTotalsUseCase()


def get_convert_quote_use_case() -> ConvertQuoteToJobUseCase:
    return ConvertQuoteToJobUseCase()


def get_complete_job_use_case() -> CompleteJobUseCase:
    return CompleteJobUseCase()


def get_generate_invoice_use_case() -> GenerateInvoiceUseCase:
    return GenerateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    return UpdateInvoiceUseCase()


def get_mark_invoice_paid_use_case() -> MarkInvoicePaidUseCase:
    return MarkInvoicePaidUseCase()


def get_reconcile_invoice_use_case() -> ReconcileInvoiceUseCase:
    return ReconcileInvoiceUseCase()


def get_render_invoice_pdf_use_case() -> RenderInvoicePdfUseCase:
    return RenderInvoicePdfUseCase()
