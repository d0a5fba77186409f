"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from src.infrastructure.storage.sqlite.sales_document_store import SQLiteSalesDocumentStore
from src.infrastructure.storage.sqlite.tenant_store import SQLiteTenantSettingsStore

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_sales_document_store: SQLiteSalesDocumentStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_tenant_store: SQLiteTenantSettingsStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_sales_document_store() -> SQLiteSalesDocumentStore:
    """Get singleton quote/job store instance."""
    global _sales_document_store
    if _sales_document_store is None:
        _sales_document_store = SQLiteSalesDocumentStore()
    return _sales_document_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_tenant_store() -> SQLiteTenantSettingsStore:
    """Get singleton tenant settings store instance."""
    global _tenant_store
    if _tenant_store is None:
        _tenant_store = SQLiteTenantSettingsStore()
    return _tenant_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteCatalogStore",
    "SQLiteSalesDocumentStore",
    "SQLiteInvoiceStore",
    "SQLiteTenantSettingsStore",
    # Factory functions
    "get_catalog_store",
    "get_sales_document_store",
    "get_invoice_store",
    "get_tenant_store",
]
