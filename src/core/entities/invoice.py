"""
Invoice domain entity.

An invoice is generated from a completed job and carries a frozen snapshot
of the job's totals. Only the invoice adjustments (discount, tax rate,
deposit) change afterwards; payable figures are re-derived from the
snapshot every time the entity is built.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from src.core.entities.sales_document import LineItems
from src.core.entities.totals import DiscountType, DocumentTotals, InvoiceTotals
from src.core.numeric import Numeric


class InvoiceStatus(str, Enum):
    """Payment status of an invoice."""

    UNPAID = "unpaid"
    PAID = "paid"


class InvoiceAdjustments(BaseModel):
    """Invoice-only fields, editable independently of the source job."""

    discount_type: DiscountType = DiscountType.FLAT
    discount_value: Numeric = 0.0
    # True: tax is computed on the discounted amount
    apply_tax_to_discount: bool = Field(
        default=False,
        validation_alias=AliasChoices("apply_tax_to_discount", "discount_apply_tax"),
    )
    deposit: Numeric = 0.0
    tax_rate_pct: Numeric = 0.0

    @field_validator("discount_type", mode="before")
    @classmethod
    def unknown_discount_is_flat(cls, value: object) -> object:
        """Anything other than a percent discount is a flat amount."""
        if isinstance(value, DiscountType):
            return value
        text = str(value or "").strip().lower()
        return DiscountType.PERCENT if text == DiscountType.PERCENT.value else DiscountType.FLAT


class Invoice(BaseModel):
    """An invoice over a frozen job snapshot."""

    id: int | None = None
    tenant_id: str | None = None
    code: str | None = None
    job_id: int | None = None
    title: str = ""
    customer_name: str | None = None
    items: LineItems = Field(default_factory=LineItems)
    snapshot: DocumentTotals = Field(default_factory=DocumentTotals)
    adjustments: InvoiceAdjustments = Field(default_factory=InvoiceAdjustments)
    memo: str | None = None
    status: InvoiceStatus = InvoiceStatus.UNPAID
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)
    paid_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_totals(self) -> "Invoice":
        """Derive payable figures from the snapshot and adjustments."""
        from src.core.services.invoice_totals import compute_invoice_totals

        adj = self.adjustments
        self.totals = compute_invoice_totals(
            self.snapshot,
            tax_rate_pct=adj.tax_rate_pct,
            discount_type=adj.discount_type,
            discount_value=adj.discount_value,
            apply_tax_to_discount=adj.apply_tax_to_discount,
            deposit=adj.deposit,
        )
        return self

    def with_adjustments(self, **changes: object) -> "Invoice":
        """Copy with some adjustments changed and totals re-derived."""
        adjustments = self.adjustments.model_copy(update=changes)
        data = self.model_dump()
        data["adjustments"] = adjustments.model_dump()
        return Invoice.model_validate(data)
