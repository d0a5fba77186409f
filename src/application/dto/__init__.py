"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    DocumentPricingRequest,
    EquipmentRequest,
    GenerateInvoiceRequest,
    InvoicePricingRequest,
    MaterialRequest,
    SalesDocumentRequest,
    StockAdjustmentRequest,
    TenantSettingsRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    CompleteJobResponse,
    ComponentHealthResponse,
    ConvertQuoteResponse,
    DocumentPricingResponse,
    EquipmentListResponse,
    EquipmentResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceAdjustmentsResponse,
    InvoiceListResponse,
    InvoicePricingResponse,
    InvoiceResponse,
    MaterialListResponse,
    MaterialResponse,
    PaginatedResponse,
    ReconciliationResponse,
    SalesDocumentListResponse,
    SalesDocumentResponse,
    StockMovementResponse,
    TenantSettingsResponse,
)

__all__ = [
    # Requests
    "EquipmentRequest",
    "MaterialRequest",
    "StockAdjustmentRequest",
    "TenantSettingsRequest",
    "SalesDocumentRequest",
    "GenerateInvoiceRequest",
    "UpdateInvoiceRequest",
    "DocumentPricingRequest",
    "InvoicePricingRequest",
    # Responses
    "EquipmentResponse",
    "EquipmentListResponse",
    "MaterialResponse",
    "MaterialListResponse",
    "TenantSettingsResponse",
    "SalesDocumentResponse",
    "SalesDocumentListResponse",
    "ConvertQuoteResponse",
    "CompleteJobResponse",
    "StockMovementResponse",
    "InvoiceResponse",
    "InvoiceAdjustmentsResponse",
    "InvoiceListResponse",
    "ReconciliationResponse",
    "DocumentPricingResponse",
    "InvoicePricingResponse",
    "HealthResponse",
    "ComponentHealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
]
