"""
Versioned schema migrations for the ShopFloor database.

Migration files live next to this module and are named ``vNNN_name.sql``.
Each applied file is recorded in ``schema_migrations`` with a checksum so
edits to an already-applied file are detected. An existing database is
copied aside before migrating and restored if a migration blows up.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(\d+)_(\w+)\.sql$")

REQUIRED_TABLES = (
    "schema_migrations",
    "tenant_settings",
    "equipment",
    "materials",
    "sales_documents",
    "invoices",
)


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match[1], name=match[2], path=path, checksum=digest[:16])

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    duration_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """All well-formed migration files, oldest first."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_ignored", path=str(path), error=str(e))
    return found


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied version to recorded checksum; empty on a blank database."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


def create_backup(db_path: Path) -> Path:
    """Copy the database file to ``<name>.backup_<timestamp>.db``."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored", backup_path=str(backup_path))


class Migrator:
    """Applies pending migrations to one database file."""

    def __init__(self, db_path: Path | None = None, directory: Path = MIGRATIONS_DIR):
        self.db_path = db_path or get_settings().storage.db_path
        self.directory = directory

    async def _apply(self, conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
        started = time.perf_counter()
        try:
            await conn.executescript(migration.read_sql())
            elapsed = int((time.perf_counter() - started) * 1000)
            await conn.execute(
                "INSERT OR REPLACE INTO schema_migrations "
                "(version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
                (migration.version, migration.name, migration.checksum, elapsed),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error(
                "migration_failed",
                version=migration.version,
                name=migration.name,
                error=str(e),
            )
            return MigrationResult(
                migration.version,
                migration.name,
                success=False,
                duration_ms=int((time.perf_counter() - started) * 1000),
                error=str(e),
            )

        logger.info(
            "migration_applied",
            version=migration.version,
            name=migration.name,
            duration_ms=elapsed,
        )
        return MigrationResult(migration.version, migration.name, True, elapsed)

    async def migrate(self, backup: bool = True) -> list[MigrationResult]:
        """
        Apply every pending migration in order, stopping at the first failure.

        Returns the results of the migrations that were attempted; an empty
        list means the schema was already current.
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        backup_path = create_backup(self.db_path) if backup and self.db_path.exists() else None
        results: list[MigrationResult] = []

        try:
            async with aiosqlite.connect(self.db_path) as conn:
                await conn.execute("PRAGMA journal_mode=WAL")
                await conn.execute("PRAGMA foreign_keys=ON")
                applied = await get_applied_migrations(conn)

                for migration in discover_migrations(self.directory):
                    recorded = applied.get(migration.version)
                    if recorded is not None:
                        if recorded != migration.checksum:
                            logger.warning("migration_checksum_mismatch", version=migration.version)
                        continue

                    result = await self._apply(conn, migration)
                    results.append(result)
                    if not result.success:
                        break
        except Exception as e:
            logger.error("migrate_failed", db_path=str(self.db_path), error=str(e))
            if backup_path is not None:
                restore_backup(self.db_path, backup_path)
            raise

        if backup_path is not None and all(r.success for r in results):
            backup_path.unlink()

        logger.info("migrate_complete", db_path=str(self.db_path), applied=len(results))
        return results

    async def status(self) -> dict[str, Any]:
        if not self.db_path.exists():
            return {
                "exists": False,
                "current_version": None,
                "applied_migrations": [],
                "pending_migrations": [],
            }

        known = discover_migrations(self.directory)
        async with aiosqlite.connect(self.db_path) as conn:
            applied = await get_applied_migrations(conn)

        return {
            "exists": True,
            "current_version": max(applied) if applied else None,
            "applied_migrations": sorted(applied),
            "pending_migrations": [m.version for m in known if m.version not in applied],
            "total_migrations": len(known),
        }

    async def verify(self) -> list[dict[str, Any]]:
        """Foreign key check, SQLite integrity check and required-table check."""
        async with aiosqlite.connect(self.db_path) as conn:
            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()
            cursor = await conn.execute("PRAGMA integrity_check")
            (integrity,) = await cursor.fetchone()
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {name for (name,) in await cursor.fetchall()}

        missing = [t for t in REQUIRED_TABLES if t not in tables]
        return [
            {
                "check": "foreign_keys",
                "status": "FAIL" if violations else "PASS",
                "violations": len(violations),
            },
            {
                "check": "integrity",
                "status": "PASS" if integrity == "ok" else "FAIL",
                "result": integrity,
            },
            {
                "check": "required_tables",
                "status": "FAIL" if missing else "PASS",
                "missing": missing,
            },
        ]


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """Bring the database (default from settings) up to the latest schema."""
    return await Migrator(db_path).migrate(backup=create_backup_before)


# Used by the API lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict[str, Any]:
    return await Migrator(db_path).status()


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict[str, Any]]:
    return await Migrator(db_path).verify()


def main(argv: list[str] | None = None) -> int:
    """``shopfloor-migrate [apply|status|verify]``; returns the exit code."""
    import argparse

    parser = argparse.ArgumentParser(prog="shopfloor-migrate", description=__doc__.strip())
    parser.add_argument(
        "command", nargs="?", default="apply", choices=("apply", "status", "verify")
    )
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    parser.add_argument("--no-backup", action="store_true", help="Do not back up before applying")
    args = parser.parse_args(argv)
    migrator = Migrator(args.db_path)

    if args.command == "status":
        status = asyncio.run(migrator.status())
        for key, value in status.items():
            print(f"{key}: {value}")
        return 0

    if args.command == "verify":
        checks = asyncio.run(migrator.verify())
        for check in checks:
            extra = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']} {extra}")
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    results = asyncio.run(migrator.migrate(backup=not args.no_backup))
    if not results:
        print("Schema is up to date")
    for r in results:
        outcome = "ok" if r.success else f"FAILED: {r.error}"
        print(f"v{r.version} {r.name} ({r.duration_ms}ms) {outcome}")
    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
