"""SQLite implementation of invoice storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.invoice import Invoice, InvoiceAdjustments, InvoiceStatus
from src.core.entities.sales_document import LineItems
from src.core.entities.totals import DocumentTotals
from src.core.exceptions import InvoiceNotFoundError
from src.core.interfaces.invoice_store import IInvoiceStore
from src.infrastructure.storage.sqlite.columns import (
    dump_json,
    load_json,
    now_iso,
    parse_timestamp,
)
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """
    Invoices with their frozen job snapshot.

    Payable totals are not stored; the entity re-derives them from the
    snapshot and adjustment columns on load.
    """

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        now = now_iso()
        adj = invoice.adjustments
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO invoices (
                    tenant_id, code, job_id, title, customer_name, items, snapshot,
                    discount_type, discount_value, apply_tax_to_discount, deposit,
                    tax_rate_pct, memo, status, paid_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.tenant_id,
                    invoice.code,
                    invoice.job_id,
                    invoice.title,
                    invoice.customer_name,
                    dump_json(invoice.items.model_dump()),
                    dump_json(invoice.snapshot.model_dump()),
                    adj.discount_type.value,
                    adj.discount_value,
                    int(adj.apply_tax_to_discount),
                    adj.deposit,
                    adj.tax_rate_pct,
                    invoice.memo,
                    invoice.status.value,
                    invoice.paid_at.isoformat() if invoice.paid_at else None,
                    now,
                    now,
                ),
            )
            invoice_id = cursor.lastrowid

        logger.info(
            "invoice_created",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice_id,
            job_id=invoice.job_id,
            code=invoice.code,
            total_due=invoice.totals.total_due,
        )
        return await self.get_invoice(invoice.tenant_id, invoice_id)

    async def get_invoice(self, tenant_id: str, invoice_id: int) -> Invoice | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM invoices WHERE tenant_id = ? AND id = ?",
                (tenant_id, invoice_id),
            )
            row = await cursor.fetchone()
            return self._row_to_invoice(row) if row else None

    async def list_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        job_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        query = "SELECT * FROM invoices WHERE tenant_id = ?"
        params: list = [tenant_id]
        if status is not None:
            query += " AND status = ?"
            params.append(InvoiceStatus(status).value)
        if job_id is not None:
            query += " AND job_id = ?"
            params.append(job_id)
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_invoice(r) for r in rows]

    async def update_invoice(self, invoice: Invoice) -> Invoice:
        adj = invoice.adjustments
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET
                    title = ?, customer_name = ?, discount_type = ?, discount_value = ?,
                    apply_tax_to_discount = ?, deposit = ?, tax_rate_pct = ?,
                    memo = ?, status = ?, paid_at = ?, updated_at = ?
                WHERE tenant_id = ? AND id = ?
                """,
                (
                    invoice.title,
                    invoice.customer_name,
                    adj.discount_type.value,
                    adj.discount_value,
                    int(adj.apply_tax_to_discount),
                    adj.deposit,
                    adj.tax_rate_pct,
                    invoice.memo,
                    invoice.status.value,
                    invoice.paid_at.isoformat() if invoice.paid_at else None,
                    now_iso(),
                    invoice.tenant_id,
                    invoice.id,
                ),
            )
            if cursor.rowcount == 0:
                raise InvoiceNotFoundError(invoice.id)

        logger.info(
            "invoice_updated",
            tenant_id=invoice.tenant_id,
            invoice_id=invoice.id,
            status=invoice.status.value,
        )
        return await self.get_invoice(invoice.tenant_id, invoice.id)

    def _row_to_invoice(self, row: aiosqlite.Row) -> Invoice:
        return Invoice(
            id=row["id"],
            tenant_id=row["tenant_id"],
            code=row["code"],
            job_id=row["job_id"],
            title=row["title"] or "",
            customer_name=row["customer_name"],
            items=LineItems.model_validate(load_json(row["items"])),
            snapshot=DocumentTotals.model_validate(load_json(row["snapshot"])),
            adjustments=InvoiceAdjustments(
                discount_type=row["discount_type"],
                discount_value=row["discount_value"],
                apply_tax_to_discount=bool(row["apply_tax_to_discount"]),
                deposit=row["deposit"],
                tax_rate_pct=row["tax_rate_pct"],
            ),
            memo=row["memo"],
            status=row["status"],
            paid_at=parse_timestamp(row["paid_at"]),
            created_at=parse_timestamp(row["created_at"]) or now_iso(),
            updated_at=parse_timestamp(row["updated_at"]) or now_iso(),
        )
