"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/numeric.py

NO infrastructure imports, no I/O. Reference data is passed in.
"""

from src.core.services.invoice_totals import (
    DiscountType,
    compute_invoice_totals,
    snapshot_pre_tax,
)
from src.core.services.numbering import (
    DEFAULT_PREFIXES,
    CodeKind,
    default_prefix,
    format_code,
)
from src.core.services.pricing import (
    DEFAULT_INK_CATEGORIES,
    build_reference_maps,
    compute_document_totals,
    equipment_charge_for_line,
    ink_cost_for_line,
)

__all__ = [
    # Quote/job totals
    "compute_document_totals",
    "build_reference_maps",
    "ink_cost_for_line",
    "equipment_charge_for_line",
    "DEFAULT_INK_CATEGORIES",
    # Invoice totals
    "compute_invoice_totals",
    "snapshot_pre_tax",
    "DiscountType",
    # Numbering
    "CodeKind",
    "DEFAULT_PREFIXES",
    "default_prefix",
    "format_code",
]
