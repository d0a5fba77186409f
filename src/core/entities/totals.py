"""Derived totals records produced by the pricing engines."""

from enum import Enum

from pydantic import BaseModel


class DiscountType(str, Enum):
    """How an invoice discount value is interpreted."""

    FLAT = "flat"
    PERCENT = "percent"


class DocumentTotals(BaseModel):
    """
    Cost/charge breakdown of a quote or job.

    Always recomputed from line items; never edited directly. Tax is not
    applied at this level, ``tax_pct`` and ``tax`` stay at 0 and
    ``total_after_tax`` equals ``total_charge_pre_tax``.
    """

    ink_cost_raw: float = 0.0
    ink_charge: float = 0.0
    mat_cost: float = 0.0
    mat_charge: float = 0.0
    eq_charge: float = 0.0
    labor_charge: float = 0.0
    addon_charge: float = 0.0
    total_cost: float = 0.0
    total_charge_pre_tax: float = 0.0
    tax_pct: float = 0.0
    tax: float = 0.0
    total_after_tax: float = 0.0
    profit: float = 0.0
    profit_pct: float = 0.0


class InvoiceTotals(BaseModel):
    """Payable figures of an invoice, derived from its snapshot and adjustments."""

    pre_tax: float = 0.0
    discount: float = 0.0
    taxable: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    total_due: float = 0.0
