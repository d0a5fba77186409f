"""Storage infrastructure implementations."""

from src.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteInvoiceStore,
    SQLiteSalesDocumentStore,
    SQLiteTenantSettingsStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteCatalogStore",
    "SQLiteSalesDocumentStore",
    "SQLiteInvoiceStore",
    "SQLiteTenantSettingsStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
