"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.config import get_settings, reset_settings
from src.infrastructure.storage.sqlite import connection as connection_module
from src.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteInvoiceStore,
    SQLiteSalesDocumentStore,
    SQLiteTenantSettingsStore,
    close_pool,
)
from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(tmp_path: Path, monkeypatch) -> AsyncGenerator[Path, None]:
    """
    Point the global settings and pool at a fresh, fully migrated database.

    Stores reach the database through the global pool, so the pool is
    reset before and closed after every test.
    """
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    reset_settings()
    connection_module._pool = None

    await initialize_database(create_backup_before=False)

    yield get_settings().storage.db_path

    await close_pool()


@pytest.fixture
def catalog_store(migrated_db) -> SQLiteCatalogStore:
    return SQLiteCatalogStore()


@pytest.fixture
def document_store(migrated_db) -> SQLiteSalesDocumentStore:
    return SQLiteSalesDocumentStore()


@pytest.fixture
def invoice_store(migrated_db) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore()


@pytest.fixture
def tenant_store(migrated_db) -> SQLiteTenantSettingsStore:
    return SQLiteTenantSettingsStore()
