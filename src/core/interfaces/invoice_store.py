"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod

from src.core.entities.invoice import Invoice, InvoiceStatus


class IInvoiceStore(ABC):
    """Invoice persistence, scoped by tenant."""

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Insert an invoice with its frozen snapshot."""
        pass

    @abstractmethod
    async def get_invoice(self, tenant_id: str, invoice_id: int) -> Invoice | None:
        """Get invoice by ID."""
        pass

    @abstractmethod
    async def list_invoices(
        self,
        tenant_id: str,
        status: InvoiceStatus | None = None,
        job_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Persist adjustments, memo and status. The snapshot never changes."""
        pass
