"""Abstract interface for quote and job storage."""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from src.core.entities.sales_document import (
    DocumentKind,
    DocumentStatus,
    SalesDocument,
)
from src.core.entities.totals import DocumentTotals


class ISalesDocumentStore(ABC):
    """Quote/job persistence, scoped by tenant."""

    @abstractmethod
    async def create_document(self, document: SalesDocument) -> SalesDocument:
        """Insert a quote or job and return it with its ID."""
        pass

    @abstractmethod
    async def get_document(
        self, tenant_id: str, kind: DocumentKind, document_id: int
    ) -> SalesDocument | None:
        """Get a quote or job by ID."""
        pass

    @abstractmethod
    async def list_documents(
        self,
        tenant_id: str,
        kind: DocumentKind,
        status: DocumentStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[SalesDocument]:
        """List quotes or jobs, newest first."""
        pass

    @abstractmethod
    async def update_document(self, document: SalesDocument) -> SalesDocument:
        """Overwrite items, totals, status and header fields."""
        pass

    @abstractmethod
    async def complete_job(
        self,
        tenant_id: str,
        job_id: int,
        totals: DocumentTotals,
        consumption: Mapping[str, float],
    ) -> tuple[SalesDocument, dict[str, float]]:
        """
        Mark an active job completed and take ``consumption`` out of stock.

        Status change and stock deductions commit together or not at all.
        Returns the job and the new on-hand quantity of every deducted
        material; materials no longer in the catalog are left out.

        Raises:
            SalesDocumentNotFoundError: no such job for the tenant
            InvalidStatusTransitionError: the job is no longer active
        """
        pass
