"""SQLite implementation of quote and job storage."""

from collections.abc import Mapping

import aiosqlite

from src.config import get_logger
from src.core.entities.sales_document import (
    DocumentKind,
    DocumentStatus,
    LineItems,
    SalesDocument,
)
from src.core.entities.totals import DocumentTotals
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError
from src.core.interfaces.sales_document_store import ISalesDocumentStore
from src.infrastructure.storage.sqlite.columns import (
    dump_json,
    load_json,
    now_iso,
    parse_timestamp,
)
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteSalesDocumentStore(ISalesDocumentStore):
    """Quotes and jobs share one table, split by ``kind``."""

    async def create_document(self, document: SalesDocument) -> SalesDocument:
        now = now_iso()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO sales_documents (
                    tenant_id, kind, code, title, customer_name, margin_pct,
                    items, totals, status, source_quote_id, notes,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    document.tenant_id,
                    document.kind.value,
                    document.code,
                    document.title,
                    document.customer_name,
                    document.margin_pct,
                    dump_json(document.items.model_dump()),
                    dump_json(document.totals.model_dump()),
                    document.status.value,
                    document.source_quote_id,
                    document.notes,
                    now,
                    now,
                ),
            )
            document_id = cursor.lastrowid

        logger.info(
            "sales_document_created",
            tenant_id=document.tenant_id,
            kind=document.kind.value,
            document_id=document_id,
            code=document.code,
            total=document.totals.total_charge_pre_tax,
        )
        return await self.get_document(document.tenant_id, document.kind, document_id)

    async def get_document(
        self, tenant_id: str, kind: DocumentKind, document_id: int
    ) -> SalesDocument | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM sales_documents WHERE tenant_id = ? AND kind = ? AND id = ?",
                (tenant_id, DocumentKind(kind).value, document_id),
            )
            row = await cursor.fetchone()
            return self._row_to_document(row) if row else None

    async def list_documents(
        self,
        tenant_id: str,
        kind: DocumentKind,
        status: DocumentStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[SalesDocument]:
        query = "SELECT * FROM sales_documents WHERE tenant_id = ? AND kind = ?"
        params: list = [tenant_id, DocumentKind(kind).value]
        if status is not None:
            query += " AND status = ?"
            params.append(DocumentStatus(status).value)
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_document(r) for r in rows]

    async def update_document(self, document: SalesDocument) -> SalesDocument:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE sales_documents SET
                    code = ?, title = ?, customer_name = ?, margin_pct = ?,
                    items = ?, totals = ?, status = ?, source_quote_id = ?,
                    notes = ?, updated_at = ?
                WHERE tenant_id = ? AND kind = ? AND id = ?
                """,
                (
                    document.code,
                    document.title,
                    document.customer_name,
                    document.margin_pct,
                    dump_json(document.items.model_dump()),
                    dump_json(document.totals.model_dump()),
                    document.status.value,
                    document.source_quote_id,
                    document.notes,
                    now_iso(),
                    document.tenant_id,
                    document.kind.value,
                    document.id,
                ),
            )
            if cursor.rowcount == 0:
                raise SalesDocumentNotFoundError(document.kind.value, document.id)

        logger.info(
            "sales_document_updated",
            tenant_id=document.tenant_id,
            kind=document.kind.value,
            document_id=document.id,
            status=document.status.value,
        )
        return await self.get_document(document.tenant_id, document.kind, document.id)

    async def complete_job(
        self,
        tenant_id: str,
        job_id: int,
        totals: DocumentTotals,
        consumption: Mapping[str, float],
    ) -> tuple[SalesDocument, dict[str, float]]:
        on_hand: dict[str, float] = {}
        now = now_iso()
        async with get_transaction() as conn:
            # Guarded so only one of two racing completions gets past here
            cursor = await conn.execute(
                """
                UPDATE sales_documents SET status = ?, totals = ?, updated_at = ?
                WHERE tenant_id = ? AND kind = ? AND id = ? AND status = ?
                """,
                (
                    DocumentStatus.COMPLETED.value,
                    dump_json(totals.model_dump()),
                    now,
                    tenant_id,
                    DocumentKind.JOB.value,
                    job_id,
                    DocumentStatus.ACTIVE.value,
                ),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    """
                    SELECT status FROM sales_documents
                    WHERE tenant_id = ? AND kind = ? AND id = ?
                    """,
                    (tenant_id, DocumentKind.JOB.value, job_id),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise SalesDocumentNotFoundError(DocumentKind.JOB.value, job_id)
                raise InvalidStatusTransitionError(
                    "job", job_id, row["status"], DocumentStatus.COMPLETED.value
                )

            for material_id, quantity in consumption.items():
                cursor = await conn.execute(
                    """
                    UPDATE materials SET on_hand = on_hand - ?, updated_at = ?
                    WHERE tenant_id = ? AND id = ?
                    """,
                    (quantity, now, tenant_id, material_id),
                )
                if cursor.rowcount == 0:
                    continue
                cursor = await conn.execute(
                    "SELECT on_hand FROM materials WHERE tenant_id = ? AND id = ?",
                    (tenant_id, material_id),
                )
                row = await cursor.fetchone()
                on_hand[material_id] = row["on_hand"]

        logger.info(
            "job_completed",
            tenant_id=tenant_id,
            job_id=job_id,
            materials_deducted=len(on_hand),
            total=totals.total_charge_pre_tax,
        )
        job = await self.get_document(tenant_id, DocumentKind.JOB, job_id)
        return job, on_hand

    def _row_to_document(self, row: aiosqlite.Row) -> SalesDocument:
        return SalesDocument(
            id=row["id"],
            tenant_id=row["tenant_id"],
            kind=row["kind"],
            code=row["code"],
            title=row["title"],
            customer_name=row["customer_name"],
            margin_pct=row["margin_pct"],
            items=LineItems.model_validate(load_json(row["items"])),
            totals=DocumentTotals.model_validate(load_json(row["totals"])),
            status=row["status"],
            source_quote_id=row["source_quote_id"],
            notes=row["notes"],
            created_at=parse_timestamp(row["created_at"]) or now_iso(),
            updated_at=parse_timestamp(row["updated_at"]) or now_iso(),
        )
