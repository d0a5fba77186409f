"""SQLite implementation of tenant settings and code allocation."""

import aiosqlite

from src.config import get_logger, get_settings
from src.core.entities.tenant import TenantSettings
from src.core.interfaces.tenant_store import ITenantSettingsStore
from src.core.services.numbering import CodeKind, format_code
from src.infrastructure.storage.sqlite.columns import (
    now_iso,
    parse_timestamp,
)
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteTenantSettingsStore(ITenantSettingsStore):
    """One ``tenant_settings`` row per tenant, created on first access."""

    def _defaults(self, tenant_id: str) -> TenantSettings:
        pricing = get_settings().pricing
        return TenantSettings(
            tenant_id=tenant_id,
            tax_rate=pricing.default_tax_rate,
            currency=pricing.default_currency,
            default_margin_pct=pricing.default_margin_pct,
        )

    async def _ensure_row(self, conn: aiosqlite.Connection, tenant_id: str) -> None:
        defaults = self._defaults(tenant_id)
        await conn.execute(
            """
            INSERT OR IGNORE INTO tenant_settings (
                tenant_id, tax_rate, currency, default_margin_pct,
                quote_prefix, job_prefix, invoice_prefix, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                tenant_id,
                defaults.tax_rate,
                defaults.currency,
                defaults.default_margin_pct,
                defaults.quote_prefix,
                defaults.job_prefix,
                defaults.invoice_prefix,
                now_iso(),
            ),
        )

    async def get_settings(self, tenant_id: str) -> TenantSettings:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM tenant_settings WHERE tenant_id = ?",
                (tenant_id,),
            )
            row = await cursor.fetchone()
            if row is not None:
                return self._row_to_settings(row)

        async with get_transaction() as conn:
            await self._ensure_row(conn, tenant_id)
            cursor = await conn.execute(
                "SELECT * FROM tenant_settings WHERE tenant_id = ?",
                (tenant_id,),
            )
            row = await cursor.fetchone()

        logger.info("tenant_settings_created", tenant_id=tenant_id)
        return self._row_to_settings(row)

    async def update_settings(self, settings: TenantSettings) -> TenantSettings:
        async with get_transaction() as conn:
            await self._ensure_row(conn, settings.tenant_id)
            await conn.execute(
                """
                UPDATE tenant_settings SET
                    tax_rate = ?, currency = ?, default_margin_pct = ?,
                    quote_prefix = ?, job_prefix = ?, invoice_prefix = ?,
                    updated_at = ?
                WHERE tenant_id = ?
                """,
                (
                    settings.tax_rate,
                    settings.currency,
                    settings.default_margin_pct,
                    settings.quote_prefix,
                    settings.job_prefix,
                    settings.invoice_prefix,
                    now_iso(),
                    settings.tenant_id,
                ),
            )

        logger.info("tenant_settings_updated", tenant_id=settings.tenant_id)
        return await self.get_settings(settings.tenant_id)

    async def allocate_code(self, tenant_id: str, kind: CodeKind) -> str:
        kind = CodeKind(kind)
        prefix_col = f"{kind.value}_prefix"
        counter_col = f"{kind.value}_counter"
        width = get_settings().pricing.code_width

        async with get_transaction() as conn:
            await self._ensure_row(conn, tenant_id)
            # Increment first so the write lock is held before the read
            await conn.execute(
                f"UPDATE tenant_settings SET {counter_col} = {counter_col} + 1 "
                "WHERE tenant_id = ?",
                (tenant_id,),
            )
            cursor = await conn.execute(
                f"SELECT {prefix_col}, {counter_col} FROM tenant_settings WHERE tenant_id = ?",
                (tenant_id,),
            )
            row = await cursor.fetchone()

        code = format_code(row[0], int(row[1]) - 1, width)
        logger.info("code_allocated", tenant_id=tenant_id, kind=kind.value, code=code)
        return code

    def _row_to_settings(self, row: aiosqlite.Row) -> TenantSettings:
        return TenantSettings(
            tenant_id=row["tenant_id"],
            tax_rate=row["tax_rate"],
            currency=row["currency"],
            default_margin_pct=row["default_margin_pct"],
            quote_prefix=row["quote_prefix"],
            quote_counter=row["quote_counter"],
            job_prefix=row["job_prefix"],
            job_counter=row["job_counter"],
            invoice_prefix=row["invoice_prefix"],
            invoice_counter=row["invoice_counter"],
            updated_at=parse_timestamp(row["updated_at"]) or now_iso(),
        )
