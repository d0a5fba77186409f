"""PDF generation infrastructure."""

from src.infrastructure.pdf.invoice_pdf_renderer import Fpdf2InvoiceRenderer, IInvoicePdfRenderer

__all__ = [
    "Fpdf2InvoiceRenderer",
    "IInvoicePdfRenderer",
]
