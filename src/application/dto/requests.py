"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from src.core.entities.equipment import BillingMode, InkRates
from src.core.entities.sales_document import LineItems
from src.core.entities.totals import DiscountType


# --- Catalog ---


class EquipmentRequest(BaseModel):
    """Create or replace an equipment row."""

    name: str = Field(..., min_length=1, description="Display name")
    type: str = Field(
        default="",
        description="Equipment category; ink categories are priced by ink usage",
        examples=["UV Printer", "Sublimation Printer", "Laser Cutter"],
    )
    mode: BillingMode = Field(default=BillingMode.HOURLY, description="hourly or flat")
    hourly_rate: float = Field(default=0.0, ge=0, description="Rate per hour")
    flat_fee: float = Field(default=0.0, ge=0, description="Flat fee per use")
    ink_rates: InkRates = Field(
        default_factory=InkRates,
        description="Unit cost per ink channel (c, m, y, k, white, soft_white, gloss)",
    )
    use_soft_white: bool = Field(
        default=False,
        description="Default white variant for lines that do not choose one",
    )


class MaterialRequest(BaseModel):
    """Create or replace a material row."""

    name: str = Field(..., min_length=1, description="Material name")
    unit: str | None = Field(default=None, description="Unit of measure", examples=["sheet", "m2"])
    purchase_price: float = Field(default=0.0, ge=0, description="Cost per unit")
    selling_price: float = Field(default=0.0, ge=0, description="Price per unit")
    on_hand: float = Field(default=0.0, description="Quantity in stock")


class StockAdjustmentRequest(BaseModel):
    """Manual stock correction, e.g. a delivery received or a count fixed."""

    delta: float = Field(..., description="Quantity added (positive) or removed (negative)")
    reason: str | None = Field(default=None, max_length=200, examples=["delivery"])


# --- Tenant settings ---


class TenantSettingsRequest(BaseModel):
    """Partial update of tenant settings; omitted fields are kept."""

    tax_rate: float | None = Field(default=None, ge=0, description="Tax rate in percent")
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    default_margin_pct: float | None = Field(default=None, ge=0)
    quote_prefix: str | None = None
    job_prefix: str | None = None
    invoice_prefix: str | None = None


# --- Quotes and jobs ---


class SalesDocumentRequest(BaseModel):
    """Create or update a quote or job.

    ``margin_pct`` defaults to the tenant's default margin when omitted.
    Totals are always derived server-side.
    """

    title: str = Field(..., min_length=1, description="Document title")
    customer_name: str | None = Field(default=None, description="Customer name")
    margin_pct: float | None = Field(
        default=None,
        description="Markup applied to raw ink cost, in percent",
    )
    items: LineItems = Field(default_factory=LineItems, description="Line items")
    notes: str | None = Field(default=None, description="Internal notes")


# --- Invoices ---


class GenerateInvoiceRequest(BaseModel):
    """Optional initial adjustments for an invoice generated from a job."""

    memo: str | None = None
    discount_type: DiscountType = DiscountType.FLAT
    discount_value: float = Field(default=0.0, ge=0)
    apply_tax_to_discount: bool = Field(
        default=False,
        validation_alias=AliasChoices("apply_tax_to_discount", "discount_apply_tax"),
    )
    deposit: float = Field(default=0.0, ge=0)
    tax_rate_pct: float | None = Field(
        default=None,
        ge=0,
        description="Override the tenant tax rate for this invoice",
    )


class UpdateInvoiceRequest(BaseModel):
    """Partial update of invoice adjustments; omitted fields are kept."""

    title: str | None = None
    customer_name: str | None = None
    memo: str | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(default=None, ge=0)
    apply_tax_to_discount: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("apply_tax_to_discount", "discount_apply_tax"),
    )
    deposit: float | None = Field(default=None, ge=0)
    tax_rate_pct: float | None = Field(default=None, ge=0)

    def adjustment_changes(self) -> dict[str, Any]:
        """Adjustment fields that were explicitly provided."""
        fields = (
            "discount_type",
            "discount_value",
            "apply_tax_to_discount",
            "deposit",
            "tax_rate_pct",
        )
        return {
            name: getattr(self, name)
            for name in fields
            if name in self.model_fields_set and getattr(self, name) is not None
        }


# --- Stateless pricing previews ---


class DocumentPricingRequest(BaseModel):
    """Price a draft document against the tenant's live reference data."""

    items: LineItems = Field(default_factory=LineItems)
    margin_pct: float | None = Field(
        default=None,
        description="Defaults to the tenant's default margin",
    )


class InvoicePricingRequest(BaseModel):
    """Compute invoice totals for an arbitrary snapshot and adjustments."""

    snapshot: dict[str, Any] | float | None = Field(
        default=None,
        description="Document totals or a bare pre-tax amount",
    )
    tax_rate_pct: float = Field(default=0.0, ge=0)
    discount_type: str = Field(default="flat", description="flat or percent")
    discount_value: float = 0.0
    apply_tax_to_discount: bool = Field(
        default=False,
        validation_alias=AliasChoices("apply_tax_to_discount", "discount_apply_tax"),
    )
    deposit: float = 0.0
