"""Schema migrations bundled as ``vNNN_name.sql`` files."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    Migrator,
    initialize_database,
    run_migrations,
)

__all__ = ["Migrator", "initialize_database", "run_migrations"]
