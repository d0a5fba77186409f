"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that change state.
"""

from src.application.dto import (
    DocumentPricingRequest,
    ErrorResponse,
    GenerateInvoiceRequest,
    HealthResponse,
    InvoicePricingRequest,
    InvoiceResponse,
    SalesDocumentRequest,
    SalesDocumentResponse,
    UpdateInvoiceRequest,
)
from src.application.services import (
    DocumentPricer,
    PricingResult,
    get_document_pricer,
    reset_services,
)
from src.application.use_cases import (
    CompleteJobUseCase,
    ConvertQuoteToJobUseCase,
    GenerateInvoiceUseCase,
    MarkInvoicePaidUseCase,
    PreviewTotalsUseCase,
    ReconcileInvoiceUseCase,
    RenderInvoicePdfUseCase,
    SaveSalesDocumentUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    # DTOs
    "SalesDocumentRequest",
    "GenerateInvoiceRequest",
    "UpdateInvoiceRequest",
    "DocumentPricingRequest",
    "InvoicePricingRequest",
    "SalesDocumentResponse",
    "InvoiceResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use cases
    "SaveSalesDocumentUseCase",
    "PreviewTotalsUseCase",
    "ConvertQuoteToJobUseCase",
    "CompleteJobUseCase",
    "GenerateInvoiceUseCase",
    "UpdateInvoiceUseCase",
    "MarkInvoicePaidUseCase",
    "ReconcileInvoiceUseCase",
    "RenderInvoicePdfUseCase",
    # Services
    "DocumentPricer",
    "PricingResult",
    "get_document_pricer",
    "reset_services",
]
