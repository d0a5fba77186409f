"""Application use cases."""

from src.application.use_cases.complete_job import CompleteJobResult, CompleteJobUseCase
from src.application.use_cases.convert_quote_to_job import (
    ConvertQuoteResult,
    ConvertQuoteToJobUseCase,
)
from src.application.use_cases.generate_invoice import GenerateInvoiceUseCase
from src.application.use_cases.preview_totals import PreviewTotalsUseCase
from src.application.use_cases.reconcile_invoice import (
    ReconcileInvoiceUseCase,
    ReconciliationResult,
)
from src.application.use_cases.render_invoice_pdf import (
    InvoicePdfResult,
    RenderInvoicePdfUseCase,
)
from src.application.use_cases.save_sales_document import (
    SaveSalesDocumentResult,
    SaveSalesDocumentUseCase,
)
from src.application.use_cases.update_invoice import (
    MarkInvoicePaidUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    "SaveSalesDocumentUseCase",
    "SaveSalesDocumentResult",
    "PreviewTotalsUseCase",
    "ConvertQuoteToJobUseCase",
    "ConvertQuoteResult",
    "CompleteJobUseCase",
    "CompleteJobResult",
    "GenerateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "MarkInvoicePaidUseCase",
    "ReconcileInvoiceUseCase",
    "ReconciliationResult",
    "RenderInvoicePdfUseCase",
    "InvoicePdfResult",
]
