"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.catalog_store import ICatalogStore
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.interfaces.sales_document_store import ISalesDocumentStore
from src.core.interfaces.tenant_store import ITenantSettingsStore

__all__ = [
    "ICatalogStore",
    "ISalesDocumentStore",
    "IInvoiceStore",
    "ITenantSettingsStore",
]
