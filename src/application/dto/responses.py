"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.core.entities.totals import DocumentTotals, InvoiceTotals


# --- Catalog ---


class EquipmentResponse(BaseModel):
    """Equipment row."""

    id: str
    name: str
    type: str
    mode: str
    hourly_rate: float
    flat_fee: float
    ink_rates: dict[str, float]
    use_soft_white: bool
    uses_ink: bool = Field(default=False, description="Priced by ink consumption")
    created_at: datetime
    updated_at: datetime


class MaterialResponse(BaseModel):
    """Material row."""

    id: str
    name: str
    unit: str | None = None
    purchase_price: float
    selling_price: float
    on_hand: float
    created_at: datetime
    updated_at: datetime


class EquipmentListResponse(BaseModel):
    items: list[EquipmentResponse]
    total: int


class MaterialListResponse(BaseModel):
    items: list[MaterialResponse]
    total: int


# --- Tenant settings ---


class TenantSettingsResponse(BaseModel):
    """Tenant settings, including the next code of each kind."""

    tenant_id: str
    tax_rate: float
    currency: str
    default_margin_pct: float
    quote_prefix: str
    job_prefix: str
    invoice_prefix: str
    next_codes: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime


# --- Quotes and jobs ---


class SalesDocumentResponse(BaseModel):
    """A quote or job with its derived totals."""

    id: int
    kind: str
    code: str | None = None
    title: str
    customer_name: str | None = None
    margin_pct: float
    status: str
    items: dict[str, Any]
    totals: DocumentTotals
    source_quote_id: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


class SalesDocumentListResponse(PaginatedResponse):
    items: list[SalesDocumentResponse]


class ConvertQuoteResponse(BaseModel):
    """Result of converting a quote into a job."""

    quote: SalesDocumentResponse
    job: SalesDocumentResponse


class StockMovementResponse(BaseModel):
    """Material quantity consumed when a job completed."""

    material_id: str
    quantity: float
    on_hand: float | None = None


class CompleteJobResponse(BaseModel):
    job: SalesDocumentResponse
    stock_movements: list[StockMovementResponse] = Field(default_factory=list)
    missing_materials: list[str] = Field(default_factory=list)


# --- Invoices ---


class InvoiceAdjustmentsResponse(BaseModel):
    discount_type: str
    discount_value: float
    apply_tax_to_discount: bool
    deposit: float
    tax_rate_pct: float


class InvoiceResponse(BaseModel):
    """Invoice with its frozen snapshot and derived payable totals."""

    id: int
    code: str | None = None
    job_id: int | None = None
    title: str
    customer_name: str | None = None
    status: str
    items: dict[str, Any]
    snapshot: DocumentTotals
    adjustments: InvoiceAdjustmentsResponse
    totals: InvoiceTotals
    memo: str | None = None
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class InvoiceListResponse(PaginatedResponse):
    items: list[InvoiceResponse]


class ReconciliationResponse(BaseModel):
    """Frozen snapshot versus a live re-pricing of the same items."""

    invoice_id: int
    snapshot: DocumentTotals
    live: DocumentTotals
    delta: dict[str, float] = Field(
        default_factory=dict,
        description="live minus snapshot, per changed field",
    )
    in_sync: bool
    missing_equipment: list[str] = Field(default_factory=list)
    missing_materials: list[str] = Field(default_factory=list)


# --- Pricing previews ---


class DocumentPricingResponse(BaseModel):
    totals: DocumentTotals
    missing_equipment: list[str] = Field(default_factory=list)
    missing_materials: list[str] = Field(default_factory=list)


class InvoicePricingResponse(BaseModel):
    totals: InvoiceTotals


# --- Health and errors ---


class ComponentHealthResponse(BaseModel):
    """Health status of a single dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    schema_version: str | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
